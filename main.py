"""
Entrypoint: run curlite from a source checkout, e.g.
    python main.py -X POST -d 'K=Key&V=Value' http://example.com
"""

import sys

from curlite.cli import main


if __name__ == "__main__":
    sys.exit(main())
