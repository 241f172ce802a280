#!/usr/bin/env python3
"""Run the reverse postal code HTTP service."""
import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import uvicorn

from postal_geocoder.core.config import LOG_LEVEL, PORT
from postal_geocoder.utils.error_tracking import setup_error_tracking
from postal_geocoder.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Local reverse postal code geocoder service")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=PORT, help="Port (default: %(default)s)")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)
    setup_error_tracking()

    # The index is built in the app lifespan, before the first request is accepted
    uvicorn.run("postal_geocoder.api.app:app", host=args.host, port=args.port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
