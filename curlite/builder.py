"""
Turns command-line input into a fully specified outbound request.
Pure transformation: no network, no filesystem.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

import structlog
from requests.structures import CaseInsensitiveDict

from .exceptions import BuildError, ConflictingBody, InvalidJson, InvalidUrl
from .url_validator import validate_url

logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
DEFAULT_METHOD = "GET"


@dataclass(frozen=True)
class NoBody:
    content_type = None

    def encode(self) -> bytes:
        return b""


@dataclass(frozen=True)
class FormBody:
    pairs: Tuple[Tuple[str, str], ...] = ()
    content_type = FORM_CONTENT_TYPE

    def encode(self) -> bytes:
        # Values are sent exactly as typed; no percent-encoding either way.
        return "&".join(f"{key}={value}" for key, value in self.pairs).encode("utf-8", "surrogateescape")


@dataclass(frozen=True)
class JsonBody:
    raw: str
    content_type = JSON_CONTENT_TYPE

    def encode(self) -> bytes:
        return self.raw.encode("utf-8", "surrogateescape")


BodySpec = Union[NoBody, FormBody, JsonBody]


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict, hash=False)
    body: bytes = b""

    def __post_init__(self):
        # read-only, case-insensitive copy; the caller's mapping is not shared
        object.__setattr__(self, "headers", MappingProxyType(CaseInsensitiveDict(self.headers)))


def parse_form(data: str) -> FormBody:
    """Parse 'key1=value1&key2=value2' into ordered pairs.

    A segment with no '=' is kept as (segment, "") instead of being
    rejected. Empty segments carry no pair and are skipped.
    """
    pairs = []
    for segment in data.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        pairs.append((key, value))
    return FormBody(tuple(pairs))


def _reject_constant(name: str):
    raise ValueError(name)


def _token_offset(raw: str, token: str) -> int:
    """Offset of the first occurrence of token outside a JSON string literal."""
    in_string = escaped = False
    for i, c in enumerate(raw):
        if in_string:
            if escaped:
                escaped = False
            elif c == '\\':
                escaped = True
            elif c == '"':
                in_string = False
        elif c == '"':
            in_string = True
        elif raw.startswith(token, i):
            return i
    return -1


def parse_json(raw: str) -> JsonBody:
    """Check that raw is valid JSON and keep it byte-for-byte."""
    try:
        json.loads(raw, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise InvalidJson(e.pos, e.msg) from e
    except ValueError as e:
        constant = str(e)
        raise InvalidJson(_token_offset(raw, constant), f"Non-standard constant {constant}") from e
    except RecursionError as e:
        raise InvalidJson(0, "Nesting too deep") from e
    return JsonBody(raw)


def body_spec(form: Optional[str] = None, json: Optional[str] = None) -> BodySpec:
    if form is not None and json is not None:
        raise ConflictingBody()
    if form is not None:
        return parse_form(form)
    if json is not None:
        return parse_json(json)
    return NoBody()


def normalize_method(method: Optional[str]) -> str:
    # No whitelist: extension methods pass through untouched apart from case.
    if method is None or not method.strip():
        return DEFAULT_METHOD
    return method.strip().upper()


def build(
    url: str,
    method: Optional[str] = None,
    form: Optional[str] = None,
    json: Optional[str] = None,
) -> RequestDescriptor:
    """Assemble a RequestDescriptor, raising BuildError on bad input."""
    url = validate_url(url)
    method = normalize_method(method)
    spec = body_spec(form=form, json=json)

    headers = CaseInsensitiveDict()
    if spec.content_type is not None:
        headers["Content-Type"] = spec.content_type
    body = spec.encode()

    logger.debug("request_built",
                 method=method,
                 url=url,
                 body_kind=type(spec).__name__,
                 body_size=len(body))
    return RequestDescriptor(method=method, url=url, headers=headers, body=body)


__all__ = [
    "BodySpec",
    "BuildError",
    "ConflictingBody",
    "FormBody",
    "InvalidJson",
    "InvalidUrl",
    "JsonBody",
    "NoBody",
    "RequestDescriptor",
    "body_spec",
    "build",
    "normalize_method",
    "parse_form",
    "parse_json",
]
