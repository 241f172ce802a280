#!/usr/bin/env python3
"""CLI script to download the GeoNames postal code dump into the local cache."""
import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from postal_geocoder.core.config import GEONAMES_CACHE_DIR, GEONAMES_DATASET, GEONAMES_URL, LOG_LEVEL
from postal_geocoder.core.errors import DataDownloadError
from postal_geocoder.gazetteers.download import get_postal_code_data
from postal_geocoder.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Download GeoNames postal code data")
    parser.add_argument("--cache-dir", type=Path, default=GEONAMES_CACHE_DIR,
                        help="Cache directory")
    parser.add_argument("--dataset", default=GEONAMES_DATASET,
                        help="Dataset name: allCountries or a country code such as US (default: %(default)s)")
    parser.add_argument("--url", default=GEONAMES_URL, help="GeoNames export base URL")

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)

    try:
        path = get_postal_code_data(args.cache_dir, url=args.url, dataset=args.dataset)
    except DataDownloadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"✅ Postal code data available at {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
