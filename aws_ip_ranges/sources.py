"""HTTP source wrapper for retrieving the published IP range feed."""
from __future__ import annotations

import dataclasses
import http.client
import socket
import time
import urllib.error
import urllib.request
from typing import Callable, Dict, Optional

from aws_ip_ranges.logging import get_logger

DEFAULT_URL = "https://ip-ranges.amazonaws.com/ip-ranges.json"
DEFAULT_USER_AGENT = "aws-ip-ranges/1.0 Python-urllib"

LOGGER = get_logger("sources")


class FetchError(RuntimeError):
    """Raised when the feed cannot be retrieved."""


@dataclasses.dataclass
class RangeSource:
    """Wraps the single HTTP endpoint publishing the range document.

    ``timeout`` defaults to ``None`` which leaves the request unbounded, the
    same as a plain ``urlopen`` call.  ``opener`` can be swapped for a callable
    returning canned bytes so callers never need a live network.
    """

    url: str = DEFAULT_URL
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    extra_headers: Optional[Dict[str, str]] = None
    opener: Optional[Callable[[urllib.request.Request, Optional[float]], bytes]] = None
    monotonic: Callable[[], float] = time.monotonic

    def _build_request(self) -> urllib.request.Request:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self.extra_headers:
            headers.update(self.extra_headers)
        return urllib.request.Request(self.url, headers=headers, method="GET")

    def _default_opener(self, request: urllib.request.Request, timeout: Optional[float]) -> bytes:
        kwargs = {} if timeout is None else {"timeout": timeout}
        with urllib.request.urlopen(request, **kwargs) as resp:
            status = getattr(resp, "status", None) or resp.getcode()
            if status is not None and status != 200:
                raise FetchError(f"{self.url} returned HTTP {status}")
            return resp.read()

    def fetch(self) -> bytes:
        """Retrieve the raw feed payload."""

        opener = self.opener or self._default_opener
        LOGGER.info("fetch_start", extra={"url": self.url, "timeout": self.timeout})
        started = self.monotonic()
        try:
            payload = opener(self._build_request(), self.timeout)
        except FetchError:
            raise
        except urllib.error.HTTPError as exc:
            raise FetchError(f"{self.url} returned HTTP {exc.code}") from exc
        except urllib.error.URLError as exc:
            raise FetchError(f"network error fetching {self.url}: {exc.reason}") from exc
        except (socket.timeout, TimeoutError) as exc:
            raise FetchError(f"timed out fetching {self.url}") from exc
        except OSError as exc:
            raise FetchError(f"error fetching {self.url}: {exc}") from exc
        except http.client.HTTPException as exc:
            raise FetchError(f"bad HTTP response from {self.url}: {exc!r}") from exc
        except ValueError as exc:
            raise FetchError(f"cannot fetch {self.url}: {exc}") from exc
        LOGGER.info(
            "fetch_complete",
            extra={"url": self.url, "bytes": len(payload), "duration": round(self.monotonic() - started, 3)},
        )
        return payload


__all__ = ["DEFAULT_URL", "DEFAULT_USER_AGENT", "FetchError", "RangeSource"]
