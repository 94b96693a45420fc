# Ensure the repository root is on sys.path so `rasterpos` can be imported in tests.

import sys
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    here = Path(__file__).resolve()
    repo_root = here.parent.parent
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_syspath()


class FakeConnection:
    """In-memory connection recording writes and replaying scripted reads.

    Each entry of ``acks`` is returned by one read call: bytes are returned
    as-is and exceptions are raised.
    """

    def __init__(self, acks=None, fail_write_at=None):
        self.writes = []
        self.acks = list(acks or [])
        self.read_timeouts = []
        self.close_count = 0
        self.fail_write_at = fail_write_at

    def write(self, data):
        if self.fail_write_at is not None and len(self.writes) == self.fail_write_at:
            raise ConnectionResetError("connection reset by peer")
        self.writes.append(bytes(data))
        return len(data)

    def read(self, size, timeout=None):
        self.read_timeouts.append(timeout)
        if not self.acks:
            return b""
        item = self.acks.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item[:size]

    def close(self):
        self.close_count += 1

    @property
    def data(self):
        return b"".join(self.writes)


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def acking_connection():
    return FakeConnection(acks=[b"\x00", b"\x00", b"\x00"])
