"""Service entrypoint.

Run with: python -m gametree --port=PORT
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from gametree.config import DEFAULT_HOST, DEFAULT_PORT

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("gametree")


def main() -> None:
    parser = argparse.ArgumentParser(description="Game tree editing service")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    logger.info("Starting on %s:%d", args.host, args.port)
    uvicorn.run("gametree.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
