"""
Network side of a request: hands method/url/headers/body to an HTTP library
and turns library failures into TransportError.
Keeps network code separate from request building and dispatch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import httpx
import requests

from . import __version__
from .exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_USER_AGENT = f"curlite/{__version__}"

CONNECT_ERROR_MESSAGE = (
    "Unable to connect to the server. Perhaps the network is offline "
    "or the server hostname cannot be resolved."
)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes = b''
    headers: Dict[str, str] = field(default_factory=dict)


class HttpTransport(Protocol):
    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        ...


class HttpxTransport:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the httpx-backed transport.

        Args:
            timeout: Seconds before connect/read/write/pool time out.
            follow_redirects: Whether 3xx responses are followed.
            max_redirects: Redirect hops before giving up.
            user_agent: Sent unless the request carries its own User-Agent.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=follow_redirects,
            max_redirects=max_redirects,
            headers={'User-Agent': user_agent},
            transport=transport,
        )

    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        try:
            response = self._client.request(
                method,
                url,
                headers=dict(headers),
                content=body or None,
            )
            # .request() reads the whole body before returning
            return TransportResponse(
                status_code=response.status_code,
                body=response.content,
                headers=dict(response.headers),
            )

        except httpx.TimeoutException as e:
            error = f"Timeout after {self.timeout}s: {e}"
            logger.warning(f"{error} for {url}")
            raise TransportError(error) from e

        except httpx.ConnectError as e:
            logger.warning(f"Connection error: {e} for {url}")
            raise TransportError(f"{CONNECT_ERROR_MESSAGE} ({e})") from e

        except httpx.RequestError as e:
            error = f"Request error: {e}"
            logger.warning(f"{error} for {url}")
            raise TransportError(error) from e

        except httpx.InvalidURL as e:
            error = f"Invalid URL: {e}"
            logger.warning(f"{error} for {url}")
            raise TransportError(error) from e

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class RequestsTransport:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self._session = requests.Session()
        self._session.max_redirects = max_redirects
        self._session.headers['User-Agent'] = user_agent

    def send(self, method: str, url: str, headers: Mapping[str, str], body: bytes) -> TransportResponse:
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body or None,
                timeout=self.timeout,
                allow_redirects=self.follow_redirects,
            )
            return TransportResponse(
                status_code=response.status_code,
                body=response.content,
                headers=dict(response.headers),
            )

        except requests.Timeout as e:
            error = f"Timeout after {self.timeout}s: {e}"
            logger.warning(f"{error} for {url}")
            raise TransportError(error) from e

        except requests.ConnectionError as e:
            logger.warning(f"Connection error: {e} for {url}")
            raise TransportError(f"{CONNECT_ERROR_MESSAGE} ({e})") from e

        except requests.RequestException as e:
            error = f"Request error: {e}"
            logger.warning(f"{error} for {url}")
            raise TransportError(error) from e

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


BACKENDS = {
    'httpx': HttpxTransport,
    'requests': RequestsTransport,
}


def create_transport(settings: Optional[Mapping[str, Any]] = None):
    """Create the transport named by settings['backend'] (httpx by default)."""
    settings = settings or {}
    backend = settings.get('backend', 'httpx')
    if backend not in BACKENDS:
        raise ValueError(f"Unknown transport backend: {backend!r} (expected one of {', '.join(BACKENDS)})")

    return BACKENDS[backend](
        timeout=float(settings.get('timeout', DEFAULT_TIMEOUT)),
        follow_redirects=bool(settings.get('follow_redirects', True)),
        max_redirects=int(settings.get('max_redirects', DEFAULT_MAX_REDIRECTS)),
        user_agent=settings.get('user_agent') or DEFAULT_USER_AGENT,
    )
