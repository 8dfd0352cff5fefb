from __future__ import annotations

import io
from typing import Callable

import pytest

from md2html.shell import Console


@pytest.fixture
def make_console() -> Callable[[str], Console]:
    """Build a console whose input is ``answers`` and whose output is captured."""

    def factory(answers: str = "") -> Console:
        return Console(stdin=io.StringIO(answers), stdout=io.StringIO(), stderr=io.StringIO())

    return factory
