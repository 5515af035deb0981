from __future__ import annotations


class ViewMaxError(Exception):
    """Base error that maps onto an API envelope."""
    status_code = 500

    def __init__(self, error: str):
        super().__init__(error)
        self.error = error

    def to_dict(self) -> dict:
        return {"success": False, "error": self.error}


class NotFound(ViewMaxError):
    status_code = 404


class BadRequest(ViewMaxError):
    status_code = 400
