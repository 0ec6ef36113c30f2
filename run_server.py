#!/usr/bin/env python3
"""
Media Hunter API Server

Runs the HTTP API consumed by the Media Hunter browser client.

Usage:
    python run_server.py --port 4000
    python run_server.py --host 0.0.0.0 --port 8080

Environment Variables:
    PEXELS_API_KEY, PIXABAY_API_KEY, GIPHY_API_KEY, FREESOUND_API_KEY
    PORT: Server port (default: 4000)
    HOST: Server host (default: 127.0.0.1)
    CORS_ORIGINS: Comma-separated allowed browser origins
"""

import argparse
import logging
import os

from media_hunter.api.server import run_api_server

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Run the Media Hunter search API"
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("HOST", "127.0.0.1"),
        help="Server host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", "4000")),
        help="Server port (default: 4000)"
    )

    args = parser.parse_args()

    configured = [
        name for name in ("PEXELS_API_KEY", "PIXABAY_API_KEY", "GIPHY_API_KEY", "FREESOUND_API_KEY")
        if os.environ.get(name)
    ]
    logger.info("Creating Media Hunter API...")
    logger.info(f"  Configured keys: {', '.join(configured) or 'none'}")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")

    run_api_server(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
