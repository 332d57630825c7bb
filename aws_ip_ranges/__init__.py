"""Fetch the published AWS IP range feed and group it by service and region."""

from __future__ import annotations

from .index import (
    NotFoundError,
    RegionNotFoundError,
    ServiceNotFoundError,
    ServiceRegionIndex,
    ServiceRegionRangeIndex,
    build_service_region_index,
    build_service_region_range_index,
)
from .ranges import DecodeError, PrefixEntry, RangeDocument, parse_ranges
from .sources import DEFAULT_URL, FetchError, RangeSource

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_URL",
    "DecodeError",
    "FetchError",
    "NotFoundError",
    "PrefixEntry",
    "RangeDocument",
    "RangeSource",
    "RegionNotFoundError",
    "ServiceNotFoundError",
    "ServiceRegionIndex",
    "ServiceRegionRangeIndex",
    "build_service_region_index",
    "build_service_region_range_index",
    "parse_ranges",
]
