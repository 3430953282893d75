"""In-memory zip archive writer."""

from __future__ import annotations

from collections.abc import Iterable
import io
import logging
import zipfile

logger = logging.getLogger(__name__)


class ZipArchiveWriter:
    """Accumulates entries and builds a zip archive in memory.

    Text entries (JSON documents) are deflated; binary entries are stored
    as-is since rendered media is already compressed. Entry timestamps are
    fixed so identical inputs build identical archives.
    """

    def __init__(self, compress_text: bool = True) -> None:
        self._compress_text = compress_text
        self._entries: dict[str, tuple[bytes, int]] = {}

    def add(self, path: str, data: bytes | str) -> None:
        if isinstance(data, str):
            payload = data.encode("utf-8")
            method = zipfile.ZIP_DEFLATED if self._compress_text else zipfile.ZIP_STORED
        else:
            payload = bytes(data)
            method = zipfile.ZIP_STORED

        if path in self._entries:
            logger.warning(f"Archive entry '{path}' written twice, keeping the latest")
        self._entries[path] = (payload, method)

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for path, (payload, method) in self._entries.items():
                info = zipfile.ZipInfo(path)
                info.compress_type = method
                zf.writestr(info, payload)
        return buffer.getvalue()


def zip_stored(entries: Iterable[tuple[str, bytes | str]]) -> bytes:
    """Build a nested archive with every entry stored uncompressed."""
    writer = ZipArchiveWriter(compress_text=False)
    for path, data in entries:
        writer.add(path, data)
    return writer.build()
