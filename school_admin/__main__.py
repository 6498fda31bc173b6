# school_admin/__main__.py
"""Arranque del servidor Uvicorn: python -m school_admin"""

import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()

    host = os.getenv("UVICORN_HOST", "0.0.0.0")
    port = int(os.getenv("UVICORN_PORT", "3002"))
    workers = int(os.getenv("UVICORN_WORKERS", "1"))

    uvicorn.run(
        "school_admin.main:app",
        host=host,
        port=port,
        workers=workers,
        log_level="info",
        server_header=False,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
