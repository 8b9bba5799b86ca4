"""Data entries and their on-disk binary encoding."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field

from nutskv.errors import NutsError

# crc, timestamp, key size, value size, flag, ttl, bucket size, status, ds, tx id
_HEADER = struct.Struct("<IQIIHIIHHQ")

DATA_ENTRY_HEADER_SIZE = _HEADER.size


class PayloadSizeMismatchError(NutsError, ValueError):
    """The payload size in the meta data does not match the payload."""

    default_message = "the payload size in meta mismatch with the payload size needed"


@dataclass
class MetaData:
    """Meta information stored in front of each data item."""

    key_size: int = 0
    value_size: int = 0
    timestamp: int = 0
    ttl: int = 0
    flag: int = 0
    bucket_size: int = 0
    tx_id: int = 0
    status: int = 0
    ds: int = 0
    crc: int = 0

    def payload_size(self) -> int:
        """Total length of bucket, key and value."""
        return self.bucket_size + self.key_size + self.value_size


@dataclass
class Entry:
    """A single data item: bucket, key, value and its meta data."""

    key: bytes = b""
    value: bytes = b""
    bucket: bytes = b""
    meta: MetaData = field(default_factory=MetaData)

    def size(self) -> int:
        """Encoded size of the entry in bytes."""
        return DATA_ENTRY_HEADER_SIZE + self.meta.payload_size()

    def _header(self) -> bytes:
        m = self.meta
        return _HEADER.pack(
            m.crc,
            m.timestamp,
            m.key_size,
            m.value_size,
            m.flag,
            m.ttl,
            m.bucket_size,
            m.status,
            m.ds,
            m.tx_id,
        )

    @staticmethod
    def _fit(data: bytes, size: int) -> bytes:
        return bytes(data[:size]).ljust(size, b"\0")

    def encode(self) -> bytes:
        """Encode the entry: header, bucket, key, value, with a CRC32 in front."""
        m = self.meta
        body = (
            self._header()[4:]
            + self._fit(self.bucket, m.bucket_size)
            + self._fit(self.key, m.key_size)
            + self._fit(self.value, m.value_size)
        )
        return struct.pack("<I", zlib.crc32(body)) + body

    def is_zero(self) -> bool:
        """True if the entry carries no data at all."""
        m = self.meta
        return m.crc == 0 and m.key_size == 0 and m.value_size == 0 and m.timestamp == 0

    def get_crc(self, buf: bytes) -> int:
        """CRC32 of the header in ``buf`` followed by bucket, key and value."""
        crc = zlib.crc32(bytes(buf[4:]))
        for part in (self.bucket, self.key, self.value):
            crc = zlib.crc32(part, crc)
        return crc

    def parse_payload(self, data: bytes) -> None:
        """Split ``data`` into bucket, key and value using the meta sizes."""
        m = self.meta
        if len(data) < m.payload_size():
            raise PayloadSizeMismatchError()
        key_start = m.bucket_size
        value_start = key_start + m.key_size
        value_end = value_start + m.value_size
        self.bucket = bytes(data[:key_start])
        self.key = bytes(data[key_start:value_start])
        self.value = bytes(data[value_start:value_end])

    def check_payload_size(self, size: int) -> None:
        """Raise if ``size`` differs from the payload size in the meta data."""
        if self.meta.payload_size() != size:
            raise PayloadSizeMismatchError()

    def parse_meta(self, buf: bytes) -> None:
        """Read the meta data from the header at the start of ``buf``."""
        if len(buf) < DATA_ENTRY_HEADER_SIZE:
            raise ValueError(
                f"entry header needs {DATA_ENTRY_HEADER_SIZE} bytes, got {len(buf)}"
            )
        (
            crc,
            timestamp,
            key_size,
            value_size,
            flag,
            ttl,
            bucket_size,
            status,
            ds,
            tx_id,
        ) = _HEADER.unpack_from(buf, 0)
        self.meta = MetaData(
            key_size=key_size,
            value_size=value_size,
            timestamp=timestamp,
            ttl=ttl,
            flag=flag,
            bucket_size=bucket_size,
            tx_id=tx_id,
            status=status,
            ds=ds,
            crc=crc,
        )