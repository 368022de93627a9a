"""Checksum verification of downloaded assets."""

from __future__ import annotations

import hashlib
import re
from enum import Enum, IntEnum
from typing import Any, Optional, Protocol

from .github import ApiClient

_SHA256_SIZE = 32
_HEX_DIGITS = "0123456789abcdefABCDEF"


class VerifyChecksumResult(IntEnum):
    """Outcome of checksum verification."""

    NONE = 0
    SUCCESS = 1
    VERIFICATION_FAILED = 2
    FAILED_NO_VERIFIER = 3


class HashAlgorithm(str, Enum):
    """Known hash algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"
    UNKNOWN = "unknown"


_BY_LENGTH = {
    16: HashAlgorithm.MD5,
    20: HashAlgorithm.SHA1,
    32: HashAlgorithm.SHA256,
    64: HashAlgorithm.SHA512,
}


def determine_hash_type_by_length(value: str) -> HashAlgorithm:
    """Guess the algorithm from the length of value, compared with digest sizes."""
    return _BY_LENGTH.get(len(value), HashAlgorithm.UNKNOWN)


def _decode_hex_prefix(text: str, limit: Optional[int] = None) -> bytes:
    """Decode hex digit pairs from the start of text until an invalid one."""
    out = bytearray()
    for start in range(0, len(text) - 1, 2):
        pair = text[start : start + 2]
        if limit is not None and len(out) >= limit:
            break
        if pair[0] not in _HEX_DIGITS or pair[1] not in _HEX_DIGITS:
            break
        out.append(int(pair, 16))
    return bytes(out)


class Sha256Error(Exception):
    """Raised when a SHA-256 checksum does not match."""

    def __init__(self, expected: Optional[bytes] = None, got: Optional[bytes] = None) -> None:
        self.expected = expected or b""
        self.got = got or b""
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            "sha256 checksum mismatch:\n"
            f"expected: {self.expected.hex()}\n"
            f"got:      {self.got.hex()}"
        )


class Verifier(Protocol):
    """Checks downloaded data, raising on a mismatch."""

    asset: Any

    def verify(self, data: bytes) -> None:
        ...

    def with_client(self, client: Optional[ApiClient]) -> "Verifier":
        ...


class NoVerifier:
    """Accepts any data."""

    def __init__(self, asset: Any = None) -> None:
        self.asset = asset

    def verify(self, data: Optional[bytes]) -> None:
        """Accept any bytes-like data (or None) without checking it."""
        if data is not None and not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected bytes, got {type(data).__name__}")

    def with_client(self, client: Optional[ApiClient]) -> "NoVerifier":
        """Return a copy; this verifier needs no client."""
        return NoVerifier(self.asset)

    def __str__(self) -> str:
        return "NoVerifier"


class Sha256Verifier:
    """Checks data against a SHA-256 given in hex."""

    def __init__(self, expected_hex: str, client: Optional[ApiClient] = None) -> None:
        expected = _decode_hex_prefix(expected_hex)
        if len(expected) != _SHA256_SIZE:
            raise ValueError(
                f"sha256sum ({expected_hex}) too small: {len(expected_hex)} bytes decoded"
            )
        self.expected = expected
        self.client = client
        self.asset: Any = None

    def verify(self, data: bytes) -> None:
        digest = hashlib.sha256(data).digest()
        if digest != self.expected:
            raise Sha256Error(self.expected, digest)

    def with_client(self, client: Optional[ApiClient]) -> "Sha256Verifier":
        self.client = client
        return self

    def __str__(self) -> str:
        return f"sha256:{self.expected.hex()}"


class Sha256AssetVerifier:
    """Checks data against the SHA-256 published in a separate checksum asset."""

    def __init__(
        self, asset_url: str, asset: Any = None, client: Optional[ApiClient] = None
    ) -> None:
        self.asset_url = asset_url
        self.asset = asset
        self.client = client

    def verify(self, data: bytes) -> None:
        response = self.client.get_json(self.asset_url)
        text = response.body.decode("latin-1")
        expected = _decode_hex_prefix(text, _SHA256_SIZE)
        if len(expected) < _SHA256_SIZE:
            raise Sha256Error(expected, b"\x00")
        digest = hashlib.sha256(data).digest()
        if digest != expected:
            raise Sha256Error(expected, digest)

    def with_client(self, client: Optional[ApiClient]) -> "Sha256AssetVerifier":
        self.client = client
        return self

    def __str__(self) -> str:
        return f"checksum verified with {self.asset_url}"


class Sha256Printer:
    """Prints the SHA-256 of the data instead of checking it."""

    def __init__(self, asset: Any = None) -> None:
        self.asset = asset

    def verify(self, data: bytes) -> None:
        print(hashlib.sha256(data).hexdigest())

    def with_client(self, client: Optional[ApiClient]) -> "Sha256Printer":
        """Return a copy for the same asset; printing needs no client."""
        return Sha256Printer(self.asset)

    def __str__(self) -> str:
        return "sha256:print"


class Sha256SumFileAssetVerifier:
    """Checks that the data's SHA-256 is listed in a sha256sum-style file."""

    def __init__(
        self,
        sha256sum_asset_url: str,
        real_asset_url: str = "",
        binary_name: str = "",
        asset: Any = None,
        client: Optional[ApiClient] = None,
    ) -> None:
        self.sha256sum_asset_url = sha256sum_asset_url
        self.real_asset_url = real_asset_url
        self.binary_name = binary_name
        self.asset = asset
        self.client = client

    def verify(self, data: bytes) -> None:
        digest = hashlib.sha256(data).digest()
        response = self.client.get_json(self.sha256sum_asset_url)
        pattern = re.compile(rf"({digest.hex()})\s+([\w_\-.]+)", re.ASCII)
        text = response.body.decode("utf-8", "replace")
        if not any(pattern.search(line) for line in text.splitlines()):
            raise Sha256Error(None, digest)

    def with_client(self, client: Optional[ApiClient]) -> "Sha256SumFileAssetVerifier":
        self.client = client
        return self

    def __str__(self) -> str:
        return f"checksum verified with {self.sha256sum_asset_url}"