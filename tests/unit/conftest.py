import pytest

from varexport import exporter as exporter_module
from varexport.exporter import NamespaceDirectory, VarExporter


class FakeClock:
    """Deterministic millisecond clock for variables that stamp times."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """A fake clock starting at epoch millisecond 0."""
    return FakeClock()


@pytest.fixture(autouse=True)
def fresh_directory(monkeypatch):
    """Give every test its own process-wide namespace directory."""
    directory = NamespaceDirectory()
    monkeypatch.setattr(exporter_module, "_directory", directory)
    return directory


@pytest.fixture
def exporter():
    """A standalone exporter, not registered in the directory."""
    return VarExporter("test")
