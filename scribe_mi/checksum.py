"""MD5 checksums for transfers through pre-signed storage URLs.

Storage backends report object integrity in two encodings: the hex digest
found in a quoted ETag header, and the base64 digest expected in a
Content-MD5 request header. Both are derived from the same raw digest.
"""

import hashlib
from base64 import b64encode


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def md5_digest(data: bytes | str) -> bytes:
    """Raw MD5 digest. Text is encoded as UTF-8."""
    return hashlib.md5(_as_bytes(data), usedforsecurity=False).digest()


def md5_hex(data: bytes | str) -> str:
    """Lowercase hex MD5, the form used in ETag headers."""
    return md5_digest(data).hex()


def md5_base64(data: bytes | str) -> str:
    """Base64 MD5, the form used in Content-MD5 headers."""
    return b64encode(md5_digest(data)).decode("ascii")


def normalize_etag(etag: str) -> str:
    """Strip quotes and a weak-validator prefix from an ETag value."""
    value = etag.strip()
    if value.startswith("W/"):
        value = value[2:]
    return value.replace('"', "").lower()


def matches_hex(data: bytes | str, declared: str) -> bool:
    """Check data against a declared hex digest (quotes tolerated)."""
    return md5_hex(data) == normalize_etag(declared)
