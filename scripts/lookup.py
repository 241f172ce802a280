#!/usr/bin/env python3
"""CLI script to find the nearest postal codes for a latitude/longitude."""
import argparse
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from postal_geocoder.core.config import DEFAULT_MAX_RESULTS, GEONAMES_CACHE_DIR, LOG_LEVEL
from postal_geocoder.core.errors import DataDownloadError, InvalidQueryPointError
from postal_geocoder.core.geocoder import ReversePostalGeocoder
from postal_geocoder.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Reverse postal code lookup")
    parser.add_argument("--lat", type=float, required=True, help="Latitude")
    parser.add_argument("--lon", type=float, required=True, help="Longitude")
    parser.add_argument("--results", type=int, default=DEFAULT_MAX_RESULTS,
                        help="Maximum number of results (default: %(default)s)")
    parser.add_argument("--data-file", type=Path, default=None,
                        help="GeoNames postal code TSV (default: download cache)")
    parser.add_argument("--cache-dir", type=Path, default=GEONAMES_CACHE_DIR,
                        help="Cache directory")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)

    geocoder = ReversePostalGeocoder()
    try:
        geocoder.init(cache_dir=args.cache_dir, data_file=args.data_file)
        results = geocoder.look_up((args.lat, args.lon), args.results) or []
    except (DataDownloadError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (InvalidQueryPointError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(json.dumps([result.to_dict() for result in results], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
