"""Everything md2html does to the outside world.

The shell picks an invocation mode from the positional arguments, reads the
source, asks before replacing an existing output file and writes the result.
It calls :func:`md2html.pipeline.process` at most once per run.
"""
from __future__ import annotations

import errno
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, TextIO, Tuple, Union

from .errors import Md2HtmlError, NoResponseError, ParseError
from .pipeline import process


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Empty title"
STDIN_NAME = "<stdin>"
USAGE = "Usage: md2html [<input-file> <output-file>]"
CONFIRM_PROMPT = "{path} already exists. Are you sure you want to overwrite it? (y/n)"
INVALID_RESPONSE = "Invalid response. Use y or n."
DECLINED = "Left {path} unchanged."

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


@dataclass(frozen=True)
class NoArgs:
    pass


@dataclass(frozen=True)
class FileArgs:
    input_path: str
    output_path: str


@dataclass(frozen=True)
class InvalidArgs:
    raw_args: Tuple[str, ...]


InvocationMode = Union[NoArgs, FileArgs, InvalidArgs]


class ConfirmationOutcome(Enum):
    PROCEED = "proceed"
    ABORT = "abort"


@dataclass
class Console:
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    def say(self, message: str) -> None:
        self.stdout.write(message + "\n")
        self.stdout.flush()

    def error(self, message: str) -> None:
        self.stderr.write(message + "\n")
        self.stderr.flush()


def select_mode(args: Sequence[str]) -> InvocationMode:
    if not args:
        return NoArgs()
    if len(args) == 2:
        return FileArgs(input_path=args[0], output_path=args[1])
    return InvalidArgs(raw_args=tuple(args))


def confirm(console: Console, prompt: str) -> ConfirmationOutcome:
    """Ask ``prompt`` until the answer is exactly ``y`` or ``n``.

    There is no attempt limit. Reaching the end of the console input raises
    :class:`NoResponseError`.
    """
    while True:
        console.say(prompt)
        answer = console.stdin.readline()
        if not answer:
            raise NoResponseError("no answer before the end of input")
        answer = answer.rstrip("\r\n")
        if answer == "y":
            return ConfirmationOutcome.PROCEED
        if answer == "n":
            return ConfirmationOutcome.ABORT
        logger.debug("Rejected confirmation answer %r", answer)
        console.say(INVALID_RESPONSE)


def read_source(path: Path) -> str:
    with path.open("r", encoding="utf-8") as handle:
        return handle.read()


def write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def run_stdio(console: Console) -> int:
    source = console.stdin.read()
    console.stdout.write(process(DEFAULT_TITLE, source))
    console.stdout.flush()
    return EXIT_OK


def run_files(mode: FileArgs, console: Console) -> int:
    input_path = Path(mode.input_path)
    output_path = Path(mode.output_path)
    source = read_source(input_path)
    logger.debug("Read %d characters from %s", len(source), input_path)
    if output_path.is_dir():
        raise IsADirectoryError(errno.EISDIR, "Is a directory", mode.output_path)
    if output_path.exists():
        outcome = confirm(console, CONFIRM_PROMPT.format(path=mode.output_path))
        if outcome is ConfirmationOutcome.ABORT:
            console.say(DECLINED.format(path=mode.output_path))
            return EXIT_OK
    write_output(output_path, process(mode.input_path, source))
    logger.debug("Wrote %s", output_path)
    return EXIT_OK


def run(args: Sequence[str], console: Optional[Console] = None) -> int:
    """Execute one invocation and return its exit status."""
    console = console or Console()
    mode = select_mode(args)
    logger.debug("Invocation mode: %s", mode)
    if isinstance(mode, InvalidArgs):
        console.error(USAGE)
        return EXIT_USAGE
    if isinstance(mode, FileArgs):
        source_name, output_name = mode.input_path, mode.output_path
    else:
        source_name, output_name = STDIN_NAME, "<stdout>"
    try:
        if isinstance(mode, FileArgs):
            return run_files(mode, console)
        return run_stdio(console)
    except ParseError as exc:
        location = source_name if exc.line_number is None else f"{source_name}:{exc.line_number}"
        console.error(f"error: {location}: {exc.message}")
    except NoResponseError as exc:
        console.error(f"error: {exc}; left {output_name} unchanged")
    except UnicodeDecodeError as exc:
        console.error(f"error: {source_name}: not valid UTF-8 ({exc.reason})")
    except OSError as exc:
        console.error(f"error: {_describe_os_error(exc)}")
    except Md2HtmlError as exc:
        console.error(f"error: {source_name}: {exc}")
    return EXIT_FAILURE


def _describe_os_error(exc: OSError) -> str:
    if exc.filename is not None and exc.strerror:
        return f"{exc.filename}: {exc.strerror}"
    return str(exc)
