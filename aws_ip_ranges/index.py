"""Service and region groupings built from a :class:`RangeDocument`."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Set, Tuple

from aws_ip_ranges.ranges import PrefixEntry


class NotFoundError(KeyError):
    """Base class for lookups of an unknown service or region."""

    kind = "Key"

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"{self.kind} {self.name} not found"


class ServiceNotFoundError(NotFoundError):
    kind = "Service"


class RegionNotFoundError(NotFoundError):
    kind = "Region"

    def __init__(self, name: str, service: str = "") -> None:
        super().__init__(name)
        self.service = service


class ServiceRegionIndex:
    """Service name -> set of region names."""

    def __init__(self) -> None:
        self._regions: Dict[str, Set[str]] = {}

    def add(self, service: str, region: str) -> None:
        self._regions.setdefault(service, set()).add(region)

    def services(self) -> List[str]:
        return sorted(self._regions)

    def regions(self, service: str) -> List[str]:
        if service not in self._regions:
            raise ServiceNotFoundError(service)
        return sorted(self._regions[service])

    def as_dict(self) -> Dict[str, List[str]]:
        return {service: self.regions(service) for service in self.services()}

    def __contains__(self, service: object) -> bool:
        return service in self._regions

    def __len__(self) -> int:
        return len(self._regions)


class ServiceRegionRangeIndex:
    """Service name -> region name -> CIDR strings.

    ``add`` creates the intermediate mappings on first use and appends, so the
    CIDR sequence for a pair is in document order and keeps repeats.
    """

    def __init__(self) -> None:
        self._ranges: Dict[str, Dict[str, List[str]]] = {}

    def add(self, service: str, region: str, ip_prefix: str) -> None:
        regions = self._ranges.setdefault(service, {})
        regions.setdefault(region, []).append(ip_prefix)

    def lookup(self, service: str, region: str) -> List[str]:
        """Return the CIDRs for *service* in *region*.

        The service is checked first; an unknown service raises
        :class:`ServiceNotFoundError` without looking at the region.
        """

        regions = self._ranges.get(service)
        if regions is None:
            raise ServiceNotFoundError(service)
        prefixes = regions.get(region)
        if prefixes is None:
            raise RegionNotFoundError(region, service=service)
        return list(prefixes)

    def services(self) -> List[str]:
        return list(self._ranges)

    def regions(self, service: str) -> List[str]:
        if service not in self._ranges:
            raise ServiceNotFoundError(service)
        return list(self._ranges[service])

    def pairs(self) -> Iterator[Tuple[str, str]]:
        for service, regions in self._ranges.items():
            for region in regions:
                yield service, region

    def as_dict(self) -> Dict[str, Dict[str, List[str]]]:
        return {service: {region: list(prefixes) for region, prefixes in regions.items()}
                for service, regions in self._ranges.items()}

    def __contains__(self, service: object) -> bool:
        return service in self._ranges

    def __len__(self) -> int:
        return len(self._ranges)


def build_service_region_index(prefixes: Iterable[PrefixEntry]) -> ServiceRegionIndex:
    """Group region names by service. Accepts a document or any entry iterable."""

    index = ServiceRegionIndex()
    for entry in prefixes:
        index.add(entry.service, entry.region)
    return index


def build_service_region_range_index(prefixes: Iterable[PrefixEntry]) -> ServiceRegionRangeIndex:
    index = ServiceRegionRangeIndex()
    for entry in prefixes:
        index.add(entry.service, entry.region, entry.ip_prefix)
    return index


__all__ = [
    "NotFoundError",
    "RegionNotFoundError",
    "ServiceNotFoundError",
    "ServiceRegionIndex",
    "ServiceRegionRangeIndex",
    "build_service_region_index",
    "build_service_region_range_index",
]
