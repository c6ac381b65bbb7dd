"""
Random-access reader over a keyed record container.

The reader knows the container framing only. It never interprets the bytes
of a record.
"""

from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO, NamedTuple

from ..errors import ArchiveOpenError, ArchiveReadError
from .format import (
    FIELD_ALIGNMENT,
    FILE_MAGIC,
    FOOTER_STRUCT,
    HEADER_STRUCT,
    RECORD_HEADER_STRUCT,
    align,
)

logger = logging.getLogger(__name__)

__all__ = ["ContainerReader"]


class _RecordSpan(NamedTuple):
    offset: int
    size: int


class ContainerReader:
    """Exposes the records of a container by key or as "the last record".

    Usage::

        with ContainerReader.open("model.pt") as reader:
            metadata, size = reader.get_last_record()
            payload, size = reader.get_record_by_key(7)
    """

    def __init__(
        self,
        stream: BinaryIO,
        max_version: int = 1,
        *,
        owns_stream: bool = False,
    ) -> None:
        """
        Wrap an already opened binary stream.

        Args:
            stream: Binary input stream. Non-seekable streams are read into memory.
            max_version: Newest container format version accepted.
            owns_stream: Close ``stream`` when the reader is closed.
        """
        if not stream.seekable():
            stream = io.BytesIO(stream.read())
        self._stream = stream
        self._owns_stream = owns_stream
        self._max_version = max_version
        self._index: dict[int, _RecordSpan] | None = None
        self._last_key: int | None = None
        self.version: int | None = None

    @classmethod
    def open(cls, path: str | os.PathLike[str], max_version: int = 1) -> "ContainerReader":
        """Open ``path`` for binary reading; the reader owns the file handle."""
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise ArchiveOpenError(f"load: could not open file {path}: {e}") from e
        return cls(stream, max_version, owns_stream=True)

    def close(self) -> None:
        if self._owns_stream:
            self._stream.close()

    @property
    def closed(self) -> bool:
        """Whether the underlying stream has been closed."""
        return self._stream.closed

    def __enter__(self) -> "ContainerReader":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def get_last_record(self) -> tuple[bytes, int]:
        """Return the payload and size of the final (metadata) record."""
        self._ensure_index()
        assert self._last_key is not None
        return self.get_record_by_key(self._last_key)

    def get_record_by_key(self, key: int) -> tuple[bytes, int]:
        """
        Return the payload and size of the record stored under ``key``.

        Raises:
            ArchiveReadError: If the key is absent or the record is truncated.
        """
        span = self._span(key)
        self._stream.seek(span.offset)
        data = self._read_exact(span.size, f"record {key}")
        logger.debug(f"Read record {key} ({span.size} bytes)")
        return data, span.size

    def record_size(self, key: int) -> int:
        """Payload size of the record under ``key`` without reading it."""
        return self._span(key).size

    def keys(self) -> list[int]:
        """Record keys in container order; the last one is the metadata record."""
        return list(self._ensure_index())

    def __len__(self) -> int:
        return len(self._ensure_index())

    def __contains__(self, key: object) -> bool:
        return key in self._ensure_index()

    def _span(self, key: int) -> _RecordSpan:
        index = self._ensure_index()
        if key not in index:
            raise ArchiveReadError(f"No record with key {key} in archive")
        return index[key]

    def _read_exact(self, size: int, what: str) -> bytes:
        data = self._stream.read(size)
        if data is None or len(data) != size:
            got = 0 if data is None else len(data)
            raise ArchiveReadError(
                f"Truncated archive: expected {size} bytes for {what}, got {got}"
            )
        return data

    def _ensure_index(self) -> dict[int, _RecordSpan]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def _build_index(self) -> dict[int, _RecordSpan]:
        """Walk every record header once, seeking past the payloads."""
        end = self._stream.seek(0, io.SEEK_END)
        if end < FIELD_ALIGNMENT + FOOTER_STRUCT.size:
            raise ArchiveReadError(f"Truncated archive: only {end} bytes")

        self._stream.seek(0)
        magic, version = HEADER_STRUCT.unpack(
            self._read_exact(HEADER_STRUCT.size, "file header")
        )
        if magic != FILE_MAGIC:
            raise ArchiveReadError(f"Bad archive magic {magic!r}")
        if not 1 <= version <= self._max_version:
            raise ArchiveReadError(
                f"Unsupported archive version {version}, "
                f"newest supported is {self._max_version}"
            )
        self.version = version

        footer_pos = end - FOOTER_STRUCT.size
        self._stream.seek(footer_pos)
        (last_key,) = FOOTER_STRUCT.unpack(
            self._read_exact(FOOTER_STRUCT.size, "footer")
        )

        index: dict[int, _RecordSpan] = {}
        cursor = FIELD_ALIGNMENT
        while cursor < footer_pos:
            if cursor + FIELD_ALIGNMENT > footer_pos:
                raise ArchiveReadError(f"Truncated record header at offset {cursor}")
            self._stream.seek(cursor)
            key, size = RECORD_HEADER_STRUCT.unpack(
                self._read_exact(RECORD_HEADER_STRUCT.size, f"record header at {cursor}")
            )
            data_offset = cursor + FIELD_ALIGNMENT
            if data_offset + size > footer_pos:
                raise ArchiveReadError(
                    f"Truncated archive: record {key} declares {size} bytes "
                    f"past the end of the container"
                )
            if key in index:
                raise ArchiveReadError(f"Corrupt archive: duplicate record key {key}")
            index[key] = _RecordSpan(data_offset, size)
            cursor = align(data_offset + size)

        if cursor != footer_pos:
            raise ArchiveReadError(f"Corrupt archive: stray bytes before footer at {cursor}")
        if not index:
            raise ArchiveReadError("Archive holds no records")
        last_record = next(reversed(index))
        if last_key != last_record:
            raise ArchiveReadError(
                f"Corrupt archive: footer names record {last_key}, "
                f"last record is {last_record}"
            )

        self._last_key = last_key
        logger.debug(f"Indexed {len(index)} records (format version {version})")
        return index
