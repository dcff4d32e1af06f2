"""
Serve the ASGI app: `python -m map_realtime`.

HOST / PORT come from the environment (default 0.0.0.0:4000).
"""

import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv(override=False)
    host = os.environ.get("HOST") or "0.0.0.0"
    port = int(os.environ.get("PORT") or "4000")
    uvicorn.run(
        "map_realtime.asgi:application",
        host=host,
        port=port,
        lifespan="on",
        log_config=None,  # Django's LOGGING owns the root logger
    )


if __name__ == "__main__":
    main()
