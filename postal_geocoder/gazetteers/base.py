"""Base class for postal code data providers."""
from abc import ABC, abstractmethod
from typing import Iterator
from postal_geocoder.core.models import PostalRecord


class PostalCodeProvider(ABC):
    """Base class for postal code record sources."""

    @abstractmethod
    def iter_records(self) -> Iterator[PostalRecord]:
        """
        Stream the provider's postal code records.

        Returns:
            Iterator of parsed records; malformed rows are skipped
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass
