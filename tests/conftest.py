"""Pytest configuration for test isolation.

``ypbank`` reads its size ceilings (``YPBANK_MAX_TEXT_BYTES``,
``YPBANK_MAX_BINARY_BYTES``) and log level (``YPBANK_LOG_LEVEL``) from the
environment. A developer shell or a stray ``.env`` could otherwise change
codec behavior between runs, so every test starts from a clean slate and runs
in its own temporary working directory, with package logging reset
afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from ypbank.logging_setup import reset_logging

_ENV_VARS = ("YPBANK_MAX_TEXT_BYTES", "YPBANK_MAX_BINARY_BYTES", "YPBANK_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # The CLI callback installs a handler bound to the runner's stderr.
    reset_logging()
