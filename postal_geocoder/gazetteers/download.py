"""Local cache of the GeoNames postal code dump.

Files live in ``<cache_dir>/postal_codes``. A file stamped with today's date
(``allCountries_YYYY-MM-DD.txt``) or a bare ``allCountries.txt`` dropped in by
hand is used as is; otherwise the zip archive is downloaded, extracted,
stamped, and every other file in the directory is removed.
"""
import zipfile
from datetime import date
from pathlib import Path
from typing import Optional

import requests
from tqdm import tqdm

from postal_geocoder.core.config import DOWNLOAD_TIMEOUT, GEONAMES_CACHE_DIR, GEONAMES_DATASET, GEONAMES_URL
from postal_geocoder.core.errors import DataDownloadError
from postal_geocoder.utils.logging import log_structured

CHUNK_SIZE = 1024 * 1024


def postal_codes_dir(cache_dir: Optional[Path] = None) -> Path:
    """Directory holding the cached postal code files."""
    return Path(cache_dir or GEONAMES_CACHE_DIR) / "postal_codes"


def _download_archive(url: str, zip_path: Path, timeout: int):
    log_structured("info", "Downloading GeoNames postal code data (this may take a while)", url=url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            if response.status_code != 200:
                raise DataDownloadError(
                    f"Error downloading GeoNames postal code data statusCode: {response.status_code}"
                )
            total = int(response.headers.get("content-length", 0)) or None
            with open(zip_path, "wb") as f, tqdm(
                total=total, unit="B", unit_scale=True, desc=zip_path.name, disable=None
            ) as progress:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
                    progress.update(len(chunk))
    except requests.RequestException as e:
        zip_path.unlink(missing_ok=True)
        raise DataDownloadError(f"Error downloading GeoNames postal code data: {e}") from e
    except DataDownloadError:
        zip_path.unlink(missing_ok=True)
        raise


def _extract_archive(zip_path: Path, member: str, target: Path):
    # The target exists only once the member is fully written
    partial = target.with_name(target.name + ".part")
    try:
        with zipfile.ZipFile(zip_path) as archive:
            if member not in archive.namelist():
                raise DataDownloadError(f"{member} not found in {zip_path.name}")
            with archive.open(member) as src, open(partial, "wb") as dst:
                while True:
                    block = src.read(CHUNK_SIZE)
                    if not block:
                        break
                    dst.write(block)
        partial.replace(target)
    except zipfile.BadZipFile as e:
        raise DataDownloadError(f"Corrupt GeoNames archive {zip_path.name}: {e}") from e
    finally:
        partial.unlink(missing_ok=True)
        zip_path.unlink(missing_ok=True)


def _remove_stale_files(directory: Path, keep: Path):
    for path in directory.iterdir():
        if path.is_file() and path.name != keep.name:
            path.unlink()


def get_postal_code_data(
    cache_dir: Optional[Path] = None,
    url: Optional[str] = None,
    dataset: Optional[str] = None,
    today: Optional[date] = None,
    timeout: Optional[int] = None
) -> Path:
    """
    Return the path of a local postal code TSV, downloading it when needed.

    Args:
        cache_dir: Cache root (default from config)
        url: Base URL of the GeoNames zip export
        dataset: Dataset name, e.g. "allCountries" or a country code such as "US"
        today: Date used for the timestamped file name
        timeout: HTTP timeout in seconds

    Returns:
        Path to the TSV file

    Raises:
        DataDownloadError: If the archive cannot be downloaded or extracted
    """
    url = url or GEONAMES_URL
    dataset = dataset or GEONAMES_DATASET
    stamp = (today or date.today()).isoformat()
    directory = postal_codes_dir(cache_dir)
    directory.mkdir(parents=True, exist_ok=True)

    timestamped = directory / f"{dataset}_{stamp}.txt"
    if timestamped.exists():
        log_structured("info", "Using cached GeoNames postal code data", path=str(timestamped))
        return timestamped

    bare = directory / f"{dataset}.txt"
    if bare.exists():
        log_structured("info", "Using cached GeoNames postal code data", path=str(bare))
        return bare

    zip_path = directory / f"{dataset}_{stamp}.zip"
    _download_archive(f"{url.rstrip('/')}/{dataset}.zip", zip_path, timeout or DOWNLOAD_TIMEOUT)
    _extract_archive(zip_path, f"{dataset}.txt", timestamped)
    log_structured("info", "Unzipped GeoNames postal code data", path=str(timestamped))

    _remove_stale_files(directory, keep=timestamped)
    return timestamped
