"""Shared fixtures for perch tests."""

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


class RecordingRouter:
    """Stand-in router handle that records every call made by a hook."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def record(self, value: Any) -> None:
        self.calls.append(value)


@pytest.fixture
def recorder() -> RecordingRouter:
    return RecordingRouter()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a dedented source file under ``tmp_path``, creating parents."""

    def write(relative: str, source: str = "") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return write

