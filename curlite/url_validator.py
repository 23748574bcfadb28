import ipaddress
from urllib.parse import urlsplit

import structlog

from .exceptions import InvalidUrl

logger = structlog.get_logger(__name__)

ALLOWED_SCHEMES = ('http', 'https')


def _reject(url, reason: str):
    logger.warning("invalid_url", url=url, reason=reason)
    raise InvalidUrl(reason)


def _check_host(url: str, host: str):
    """Reject hosts that look like IP literals but do not parse as one."""
    if ':' in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            _reject(url, "The URL contains an invalid IPv6 address.")
        return

    if all(c.isdigit() or c == '.' for c in host):
        try:
            ipaddress.IPv4Address(host)
        except ValueError:
            _reject(url, "The URL contains an invalid IPv4 address.")


def validate_url(url: str) -> str:
    """Return url unchanged if it is an absolute http(s) URL, else raise InvalidUrl."""
    if not url or not isinstance(url, str):
        _reject(url, "Empty or invalid URL")

    if any(c.isspace() for c in url):
        if '://' not in url:
            _reject(url, "The URL does not have a valid base protocol.")
        _reject(url, "Invalid URL: contains whitespace")

    if not url.isprintable():
        _reject(url, "Invalid URL: contains non-printable characters")

    try:
        parsed = urlsplit(url)
    except ValueError:
        # unbalanced or malformed [...] host
        _reject(url, "The URL contains an invalid IPv6 address.")

    if not parsed.scheme or (not parsed.netloc and '://' not in url):
        _reject(url, "The URL does not have a valid base protocol.")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        _reject(url, f"Invalid scheme: {parsed.scheme}")

    host = parsed.hostname
    if not host:
        _reject(url, "The URL does not contain a host.")

    _check_host(url, host)

    try:
        port = parsed.port
    except ValueError:
        _reject(url, "The URL contains an invalid port number.")

    logger.debug("url_validated", url=url, host=host, port=port)

    return url
