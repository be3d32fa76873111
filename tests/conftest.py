import io
import os
import pathlib
import sys
from email import message_from_bytes
from email.policy import HTTP
from typing import Callable, List, Optional, Tuple

import pytest

# Ensure project root is on sys.path so `import tgupload...` works
PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests offline and independent of a local .env
os.environ.setdefault("BOT_TOKEN", "123:TEST")


class CountingStream(io.BytesIO):
    """BytesIO that records how often it was closed and can fail on read."""

    def __init__(self, data: bytes = b"", *, fail_after: Optional[int] = None) -> None:
        super().__init__(data)
        self.close_calls = 0
        self._reads = 0
        self._fail_after = fail_after

    def read(self, size: int = -1) -> bytes:
        if self._fail_after is not None and self._reads >= self._fail_after:
            raise OSError("disk went away")
        self._reads += 1
        return super().read(size)

    def close(self) -> None:
        self.close_calls += 1
        super().close()


@pytest.fixture
def counting_stream() -> Callable[..., CountingStream]:
    def _make(data: bytes = b"", **kwargs) -> CountingStream:
        return CountingStream(data, **kwargs)

    return _make


def _parse_multipart(content_type: str, body: bytes) -> List[Tuple[str, Optional[str], bytes]]:
    raw = b"Content-Type: " + content_type.encode("ascii") + b"\r\n\r\n" + body
    msg = message_from_bytes(raw, policy=HTTP)
    assert msg.is_multipart()
    parts = []
    for part in msg.iter_parts():
        name = part.get_param("name", header="content-disposition")
        parts.append((name, part.get_filename(), part.get_payload(decode=True)))
    return parts


@pytest.fixture
def parse_multipart() -> Callable[[str, bytes], List[Tuple[str, Optional[str], bytes]]]:
    """Read a multipart/form-data body back into (field, filename, content) tuples."""
    return _parse_multipart
