"""Command line interface for listing published AWS IP ranges."""

from __future__ import annotations

import argparse
import json
import math
import sys
from typing import List, Optional, Sequence, TextIO

from aws_ip_ranges.config import AppConfig, load_config
from aws_ip_ranges.index import (
    NotFoundError,
    ServiceRegionIndex,
    build_service_region_index,
    build_service_region_range_index,
)
from aws_ip_ranges.logging import LOG_LEVELS, configure_logging, get_logger, log_context
from aws_ip_ranges.ranges import DecodeError, RangeDocument, parse_ranges
from aws_ip_ranges.sources import FetchError, RangeSource

LOGGER = get_logger("cli")

MODE_CATALOG = "catalog"
MODE_LOOKUP = "lookup"
SEPARATOR = "-----------------------"
CATALOG_HEADER = "Please run the application specifying -service and -region with a combination listed below:"


class FlagValidationError(ValueError):
    """Raised when only one of ``service``/``region`` is supplied."""


def _positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid timeout: {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError("timeout must be a positive number")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aws-ip-ranges",
        description="List AWS services and regions, or the IP ranges of one service/region pair.",
    )
    parser.add_argument("-service", "--service", default="", help="AWS Service")
    parser.add_argument("-region", "--region", default="", help="AWS Region")
    parser.add_argument("--url", default=None, help="Override the ip-ranges.json URL.")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="HTTP timeout in seconds (default: no timeout).",
    )
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout.")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=sorted(LOG_LEVELS),
        help="Logging verbosity for the JSON log on stderr (default: WARNING).",
    )
    return parser


def select_mode(service: str, region: str) -> str:
    """Pick the output mode from the flag pair.

    Both empty selects the catalog, both set selects a lookup, anything else
    is a :class:`FlagValidationError`.
    """

    if bool(service) != bool(region):
        raise FlagValidationError("Region and Service must be specified together")
    return MODE_LOOKUP if service else MODE_CATALOG


def build_source(config: AppConfig) -> RangeSource:
    return RangeSource(url=config.url, timeout=config.timeout, user_agent=config.user_agent)


def print_catalog(
    document: RangeDocument,
    index: ServiceRegionIndex,
    out: TextIO,
    as_json: bool = False,
) -> None:
    if as_json:
        payload = {
            "syncToken": document.sync_token,
            "createDate": document.create_date,
            "services": index.as_dict(),
        }
        print(json.dumps(payload, indent=2), file=out)
        return
    print(CATALOG_HEADER, file=out)
    print(file=out)
    print(SEPARATOR, file=out)
    for service in index.services():
        print(f"Service: {service}", file=out)
        print(f"Regions: {', '.join(index.regions(service))}", file=out)
        print(SEPARATOR, file=out)


def print_lookup(
    service: str,
    region: str,
    prefixes: Sequence[str],
    out: TextIO,
    as_json: bool = False,
) -> None:
    if as_json:
        payload = {"service": service, "region": region, "ip_prefixes": list(prefixes)}
        print(json.dumps(payload, indent=2), file=out)
        return
    print(f"Service: {service}", file=out)
    print(f"Region: {region}", file=out)
    print("IP Ranges:", file=out)
    for prefix in prefixes:
        print(prefix, file=out)


def _error(message: object) -> int:
    print(f"error: {message}", file=sys.stderr)
    return 1


def run(ns: argparse.Namespace, config: AppConfig) -> int:
    try:
        mode = select_mode(ns.service, ns.region)
    except FlagValidationError as exc:
        return _error(exc)

    source = build_source(config)
    with log_context(mode=mode, service=ns.service or None, region=ns.region or None):
        try:
            document = parse_ranges(source.fetch())
        except (FetchError, DecodeError) as exc:
            LOGGER.debug("load_failed", exc_info=True)
            return _error(exc)

        if mode == MODE_CATALOG:
            print_catalog(document, build_service_region_index(document), sys.stdout, as_json=ns.json)
            return 0

        index = build_service_region_range_index(document)
        try:
            prefixes = index.lookup(ns.service, ns.region)
        except NotFoundError as exc:
            LOGGER.info("lookup_miss", extra={"missing": exc.name})
            return _error(exc)
        print_lookup(ns.service, ns.region, prefixes, sys.stdout, as_json=ns.json)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    try:
        config = load_config().override(url=ns.url, timeout=ns.timeout, log_level=ns.log_level)
    except ValueError as exc:
        return _error(exc)
    configure_logging(config.log_level, stream=sys.stderr, force=True)
    return run(ns, config)


def entrypoint() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
