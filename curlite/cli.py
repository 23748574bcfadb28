"""
Entrypoint: load config, init logging, build the request, send it once,
print the outcome and turn it into an exit status.
"""

import argparse
import logging
import sys
from typing import List, Optional

import structlog
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .builder import build
from .config import Config
from .dispatcher import dispatch
from .exceptions import BuildError
from .printer import print_error, print_outcome, print_request_summary
from .transport import BACKENDS, HttpTransport, create_transport

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = structlog.get_logger(__name__)


def setup_logging(level: str = 'WARNING', json_logs: bool = False):
    """Route structlog through stdlib logging on stderr; stdout is for the response."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.WARNING,
    )
    logging.getLogger('curlite').setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='curlite',
        description='A simple curl command-line tool',
    )
    parser.add_argument('url', help='URL to request')
    parser.add_argument(
        '-X', '--request',
        dest='method',
        default='GET',
        metavar='METHOD',
        help='HTTP method to use (GET, POST, etc.). Default: GET',
    )
    # -d and --json are not an argparse exclusive group: build() reports the conflict
    parser.add_argument(
        '-d', '--data',
        metavar='DATA',
        help="Form data to send, in the form 'key1=value1&key2=value2'",
    )
    parser.add_argument(
        '--json',
        metavar='JSON',
        help='Raw JSON document to send as the request body',
    )
    parser.add_argument(
        '--timeout',
        type=float,
        help='Seconds before the request times out (default from config)',
    )
    parser.add_argument(
        '--backend',
        choices=sorted(BACKENDS),
        help='HTTP library used to send the request (default from config)',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print the request summary and debug logs to stderr',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def run(args: argparse.Namespace, config: Config, transport: Optional[HttpTransport] = None) -> int:
    try:
        req = build(args.url, args.method, form=args.data, json=args.json)
    except BuildError as e:
        print_error(e)
        return EXIT_FAILURE

    if args.verbose:
        print_request_summary(req)

    owns_transport = transport is None
    if owns_transport:
        try:
            transport = create_transport(config.transport)
        except ValueError as e:
            print_error(e)
            return EXIT_FAILURE

    try:
        outcome = dispatch(req, transport)
    finally:
        if owns_transport:
            transport.close()

    print_outcome(outcome)
    return EXIT_OK if outcome.ok else EXIT_FAILURE


def main(argv: Optional[List[str]] = None, transport: Optional[HttpTransport] = None) -> int:
    """Main entry point for the curlite command."""
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)

    try:
        config = Config()
    except (FileNotFoundError, ValueError) as e:
        print_error(e)
        return EXIT_FAILURE

    config.override('transport', backend=args.backend, timeout=args.timeout)
    log_config = config.logging
    setup_logging(
        level='DEBUG' if args.verbose else log_config.get('level', 'WARNING'),
        json_logs=bool(log_config.get('json', False)),
    )

    try:
        return run(args, config, transport=transport)
    except KeyboardInterrupt:
        logger.info("interrupted_by_user")
        print("\nInterrupted", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
