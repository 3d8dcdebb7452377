"""sitecms entrypoint.

Run with:
  python -m sitecms
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("SITECMS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("SITECMS_HOST", "0.0.0.0")
    port = int(os.getenv("SITECMS_PORT", "8000"))
    reload = os.getenv("SITECMS_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("sitecms.app:app", host=host, port=port, reload=reload, log_config=None)


if __name__ == "__main__":
    main()
