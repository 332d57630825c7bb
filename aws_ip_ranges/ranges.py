"""Data model and decoder for the published IP range document."""
from __future__ import annotations

import dataclasses
import json
from typing import Any, Iterator, List, Mapping, Tuple, Union

from aws_ip_ranges.logging import get_logger

LOGGER = get_logger("ranges")


class DecodeError(ValueError):
    """Raised when a payload is not a well-formed range document."""


@dataclasses.dataclass(frozen=True)
class PrefixEntry:
    """One IPv4 prefix line of the feed."""

    ip_prefix: str
    region: str
    service: str


@dataclasses.dataclass(frozen=True)
class RangeDocument:
    """Normalized representation of the whole feed.

    ``prefixes`` keeps the order of the source array; the index builders rely
    on it.
    """

    sync_token: str
    create_date: str
    prefixes: Tuple[PrefixEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.prefixes)

    def __iter__(self) -> Iterator[PrefixEntry]:
        return iter(self.prefixes)

    def services(self) -> List[str]:
        """Distinct service names in order of first appearance."""

        return list(dict.fromkeys(entry.service for entry in self.prefixes))


def _string_field(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{where}: field {key!r} must be a string, got {type(value).__name__}")
    return value


def _parse_entry(raw: Any, position: int) -> PrefixEntry:
    where = f"prefixes[{position}]"
    if not isinstance(raw, dict):
        raise DecodeError(f"{where}: expected an object, got {type(raw).__name__}")
    return PrefixEntry(
        ip_prefix=_string_field(raw, "ip_prefix", where),
        region=_string_field(raw, "region", where),
        service=_string_field(raw, "service", where),
    )


def parse_ranges(payload: Union[bytes, str]) -> RangeDocument:
    """Decode *payload* into a :class:`RangeDocument`.

    Missing string fields decode to ``""`` and a missing ``prefixes`` array to
    an empty document; anything that is not JSON, or has the wrong type where a
    known field is present, raises :class:`DecodeError`.
    """

    if isinstance(payload, bytes):
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"payload is not valid UTF-8: {exc}") from exc
    else:
        text = payload

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON in range document: {exc}") from exc

    if not isinstance(data, dict):
        raise DecodeError(f"range document must be a JSON object, got {type(data).__name__}")

    raw_prefixes = data.get("prefixes")
    if raw_prefixes is None:
        raw_prefixes = []
    if not isinstance(raw_prefixes, list):
        raise DecodeError("field 'prefixes' must be an array")

    document = RangeDocument(
        sync_token=_string_field(data, "syncToken", "document"),
        create_date=_string_field(data, "createDate", "document"),
        prefixes=tuple(_parse_entry(raw, i) for i, raw in enumerate(raw_prefixes)),
    )
    LOGGER.debug(
        "parse_complete",
        extra={"sync_token": document.sync_token, "create_date": document.create_date, "prefixes": len(document)},
    )
    return document


__all__ = ["DecodeError", "PrefixEntry", "RangeDocument", "parse_ranges"]
