"""
Convert markup into an HTML page.

    md2html                         read stdin, write stdout
    md2html <input> <output>        convert a file, asking before overwriting
"""
from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from .shell import run


DEBUG_ENV = "MD2HTML_DEBUG"


def configure_logging() -> None:
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
