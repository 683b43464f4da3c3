"""
Run the site backend with uvicorn.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from abacus_backend.app import configure_logging
from abacus_backend.config import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Matrix Abacus site backend")
    parser.add_argument("--host", type=str, default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    logger.info("Server running on http://%s:%d", args.host, args.port)
    uvicorn.run(
        "abacus_backend.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
