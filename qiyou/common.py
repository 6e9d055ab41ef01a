from __future__ import annotations

import http.client
import socket
import urllib.request
from urllib.error import HTTPError, URLError
from urllib.parse import quote

from query_policy import QUERY_POLICY, SITE_ROOT

from .types import HttpResponse

DEFAULT_TIMEOUT_SECONDS = QUERY_POLICY["timeout_seconds"]
USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.0 Mobile/15E148 Safari/604.1"
)
REQUEST_HEADERS = {
    "Referer": SITE_ROOT,
    "User-Agent": USER_AGENT,
}
DNS_FAILURE_TEXT = (
    "nodename nor servname provided",
    "name or service not known",
    "temporary failure in name resolution",
)


class FetchError(Exception):
    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """Network, DNS, timeout or dropped-connection failure; no usable response."""


class HttpStatusError(FetchError):
    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message, url)
        self.status = status


class NotFoundPage(FetchError):
    """A response arrived but the page is empty or the site's 404 page."""


def build_query_url(region: str) -> str:
    path = quote(region.strip().strip("/"), safe="/-")
    return f"{SITE_ROOT.rstrip('/')}/{path}.shtml"


def _is_dns_error(err: Exception) -> bool:
    reason = getattr(err, "reason", err)
    if isinstance(reason, socket.gaierror):
        return True
    text = f"{err} {reason}".lower()
    return any(marker in text for marker in DNS_FAILURE_TEXT)


def _is_timeout(err: Exception) -> bool:
    if isinstance(err, (socket.timeout, TimeoutError)):
        return True
    reason = getattr(err, "reason", None)
    return isinstance(reason, (socket.timeout, TimeoutError))


def fetch_page(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> HttpResponse:
    """Single GET, no retries.

    Non-2xx responses come back as an ``HttpResponse`` so the caller can
    classify them; only failures that never produced a response raise.
    """
    req = urllib.request.Request(url, headers=dict(headers or REQUEST_HEADERS))
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            body = response.read().decode("utf-8", errors="ignore")
            return HttpResponse(status=response.status, body=body, url=url)
    except HTTPError as err:
        body = err.read().decode("utf-8", errors="ignore") if err.fp is not None else ""
        return HttpResponse(status=err.code, body=body, url=url)
    except (URLError, OSError, http.client.HTTPException) as err:
        if _is_dns_error(err):
            raise TransportError(f"DNS lookup failed for {url}: {err}", url) from err
        if _is_timeout(err):
            raise TransportError(f"Timed out after {timeout}s fetching {url}", url) from err
        raise TransportError(f"Failed to fetch URL: {url}: {err}", url) from err


def check_response(response: HttpResponse) -> str:
    """Return the body of a usable page or raise the matching ``FetchError``."""
    if response.status != 200:
        raise HttpStatusError(
            f"Unexpected HTTP status {response.status} from {response.url}",
            response.url,
            status=response.status,
        )
    body = response.body or ""
    if not body.strip() or QUERY_POLICY["not_found_marker"] in body:
        raise NotFoundPage(f"Page missing or empty: {response.url}", response.url)
    return body
