"""
Request construction for the Yandex.Disk API.

Both the synchronous and the asynchronous client build their outbound calls
here, so URL resolution, body encoding and authentication behave the same
regardless of the HTTP library underneath.
"""

import json
import dataclasses
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import urljoin, urlsplit, urlunsplit

from .exceptions import InvalidURLError, SerializationError


DEFAULT_BASE_URL = "https://cloud-api.yandex.net/"
API_VERSION = "1"
JSON_CONTENT_TYPE = "application/json"


@dataclass
class ApiRequest:
    """A fully formed outbound API call."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    # None means "no payload at all", which is not the same as b"".
    body: Optional[bytes] = None


def resolve_url(base_url: str, url_str: str) -> str:
    """
    Resolve a relative resource path against the API base URL.

    The path is namespaced under the API version and gets a trailing slash,
    so ``"disk"`` becomes ``<base>/v1/disk/``. A query string, if any, is
    carried over unchanged. Relative paths should not start with a slash.
    """
    try:
        parts = urlsplit(url_str)
    except ValueError as e:
        raise InvalidURLError(f"Cannot parse {url_str!r}: {e}", url=url_str) from e

    if url_str.startswith(":"):
        raise InvalidURLError(f"Cannot parse {url_str!r}: missing protocol scheme", url=url_str)
    if parts.scheme or parts.netloc:
        raise InvalidURLError(f"Expected a relative path, got {url_str!r}", url=url_str)
    if ":" in parts.path.split("/", 1)[0]:
        raise InvalidURLError(f"Cannot parse {url_str!r}: first path segment cannot contain colon", url=url_str)

    path = f"v{API_VERSION}/{parts.path}/"
    return urljoin(base_url, urlunsplit(("", "", path, parts.query, "")))


def encode_body(body: Any) -> bytes:
    """
    Encode a request body as compact JSON terminated by a newline.

    Dataclasses and objects exposing ``to_dict()`` are converted first.
    """
    if hasattr(body, "to_dict"):
        body = body.to_dict()
    elif dataclasses.is_dataclass(body) and not isinstance(body, type):
        body = dataclasses.asdict(body)

    try:
        encoded = json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Request body is not JSON serializable: {e}") from e

    return (encoded + "\n").encode("utf-8")


def build_request(
    method: str,
    base_url: str,
    access_token: str,
    url_str: str,
    body: Any = None,
) -> ApiRequest:
    """
    Create an API request.

    If ``body`` is given it is JSON encoded and sent as the request payload.
    No network I/O happens here.
    """
    url = resolve_url(base_url, url_str)

    headers = {}
    payload = None
    if body is not None:
        payload = encode_body(body)
        headers["Content-Type"] = JSON_CONTENT_TYPE
        headers["Accept"] = JSON_CONTENT_TYPE

    headers["Authorization"] = f"OAuth {access_token}"

    return ApiRequest(method=method.upper(), url=url, headers=headers, body=payload)
