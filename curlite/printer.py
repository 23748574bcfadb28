import json
import sys
from typing import Mapping, Optional, TextIO

from .builder import RequestDescriptor
from .dispatcher import Failure, Outcome


def extract_charset(headers: Optional[Mapping[str, str]]) -> str:
    """Charset from a Content-Type header, utf-8 when absent."""
    content_type = ''
    for key, value in (headers or {}).items():
        if key.lower() == 'content-type':
            content_type = value
            break

    if 'charset=' in content_type.lower():
        charset = content_type.lower().split('charset=')[1].split(';')[0].strip(' \'"')
        if charset:
            return charset
    return 'utf-8'


def decode_body(body: bytes, charset: str = 'utf-8') -> str:
    try:
        return body.decode(charset, errors='replace')
    except LookupError:
        return body.decode('utf-8', errors='replace')


def format_body(body: bytes, charset: str = 'utf-8') -> str:
    """Pretty-print JSON bodies with keys sorted at every level; other bodies as text."""
    text = decode_body(body, charset)
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return text
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)


def format_request_summary(req: RequestDescriptor) -> str:
    lines = [
        f"Requesting URL: {req.url}",
        f"Method: {req.method}",
    ]
    if req.body:
        lines.append(f"Data: {decode_body(req.body)}")
    return "\n".join(lines)


def print_request_summary(req: RequestDescriptor, stream: TextIO = None):
    print(format_request_summary(req), file=stream or sys.stderr)


def print_outcome(outcome: Outcome, stream: TextIO = None, err_stream: TextIO = None):
    stream = stream or sys.stdout
    err_stream = err_stream or sys.stderr

    if isinstance(outcome, Failure):
        print(f"Error: {outcome.message}", file=err_stream)
        return

    print(f"Status: {outcome.status_code}", file=stream)
    if outcome.body:
        print(format_body(outcome.body, extract_charset(outcome.headers)), file=stream)


def print_error(error: Exception, err_stream: TextIO = None):
    print(f"Error: {error}", file=err_stream or sys.stderr)
