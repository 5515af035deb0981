# viewmax/healthcheck.py
import sys, json
from viewmax.config import get_config
from viewmax.client.api import ApiClientError, ViewMaxAPI


def main():
    # Probe the local API; exit non-zero if it is not answering
    cfg = get_config()
    api = ViewMaxAPI(f"http://127.0.0.1:{cfg.server.port}", timeout=5)
    try:
        res = api.health_check()
    except ApiClientError as e:
        print(json.dumps({"ok": False, "error": str(e)}))
        sys.exit(1)
    ok = bool(res.get("success"))
    print(json.dumps({"ok": ok, "version": res.get("version")}))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
