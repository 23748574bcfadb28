"""
Sends one RequestDescriptor through a transport and classifies the result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Union

import structlog

from .builder import RequestDescriptor
from .exceptions import TransportError
from .transport import HttpTransport

logger = structlog.get_logger(__name__)


class ErrorKind(Enum):
    TRANSPORT = "transport"


@dataclass(frozen=True)
class Success:
    """A response arrived. Any status code counts, 4xx and 5xx included."""

    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict, compare=False)

    ok = True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    ok = False


Outcome = Union[Success, Failure]


def dispatch(req: RequestDescriptor, transport: HttpTransport) -> Outcome:
    """Make a single attempt to send req. No retries."""
    logger.debug("dispatching", method=req.method, url=req.url, body_size=len(req.body))

    try:
        response = transport.send(req.method, req.url, req.headers, req.body)
    except TransportError as e:
        logger.info("transport_failure", method=req.method, url=req.url, error=e.message)
        return Failure(ErrorKind.TRANSPORT, e.message)

    logger.debug("response_received",
                 url=req.url,
                 status_code=response.status_code,
                 body_size=len(response.body))
    return Success(response.status_code, response.body, response.headers)
