"""Configuration management for the reverse postal code geocoder."""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))
GEONAMES_CACHE_DIR = Path(os.getenv("GEONAMES_CACHE_DIR", DATA_DIR / "geonames_cache"))

# GeoNames postal code dump, see http://download.geonames.org/export/zip/
GEONAMES_URL: str = os.getenv("GEONAMES_URL", "http://download.geonames.org/export/zip/")
GEONAMES_DATASET: str = os.getenv("GEONAMES_DATASET", "allCountries")

# Explicit TSV path; skips the download cache entirely when set
_data_file = os.getenv("GEONAMES_DATA_FILE")
GEONAMES_DATA_FILE: Optional[Path] = Path(_data_file) if _data_file else None

DOWNLOAD_TIMEOUT: int = int(os.getenv("DOWNLOAD_TIMEOUT", "300"))  # seconds

# Lookup settings
DEFAULT_MAX_RESULTS: int = int(os.getenv("DEFAULT_MAX_RESULTS", "1"))
LOOKUP_MAX_WORKERS: int = int(os.getenv("LOOKUP_MAX_WORKERS", "1"))

# Service settings
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
PORT: int = int(os.getenv("PORT", "3000"))
