from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure src/ is importable for all tests (CI and local)
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


def pytest_collection_modifyitems(config, items):
    """Default all tests to 'unit' unless explicitly marked otherwise."""
    for item in items:
        marks = {m.name for m in item.iter_markers()}
        if not ("integ" in marks or "smoke" in marks or "unit" in marks):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    from event_emitter.config import ENV_DEFAULT_MAX_LISTENERS, reset_settings

    monkeypatch.delenv(ENV_DEFAULT_MAX_LISTENERS, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def emitter():
    from event_emitter import Emitter

    instance = Emitter()
    yield instance
    instance.destroy()


class Recorder:
    """Callable that records the arguments of every call."""

    def __init__(self, result: object = None) -> None:
        self.calls: list[tuple] = []
        self.result = result

    def __call__(self, *args):
        self.calls.append(args)
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recorder():
    return Recorder
