# ipfs_cid/w3up/multibase.py
"""
The few multiformats primitives the w3 CLI credentials need.

Keys and proofs are multibase strings: a one-character prefix naming the
base, followed by the encoded bytes. Only the bases the w3 tooling emits
are understood here.
"""

import base64
import binascii

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


class MultibaseError(ValueError):
    pass


def _pad(data: str) -> str:
    return data + "=" * (-len(data) % 4)


def decode(value: str) -> bytes:
    """Decode a multibase string (base64, base64pad or base64url)."""
    if not value:
        raise MultibaseError("empty multibase string")

    prefix, body = value[0], value[1:].strip()
    try:
        if prefix == "M":
            return base64.b64decode(body, validate=True)
        if prefix == "m":
            return base64.b64decode(_pad(body), validate=True)
        if prefix in ("u", "U"):
            return base64.urlsafe_b64decode(_pad(body))
    except (binascii.Error, ValueError) as e:
        raise MultibaseError(f"invalid base64 payload: {e}") from e

    raise MultibaseError(f"unsupported multibase prefix {prefix!r}")


def encode_base58btc(data: bytes) -> str:
    """Encode bytes as a base58btc multibase string ('z' prefix)."""
    number = int.from_bytes(data, "big")
    chars = []
    while number:
        number, rem = divmod(number, 58)
        chars.append(BASE58_ALPHABET[rem])

    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    return "z" + "1" * leading_zeros + "".join(reversed(chars))


def decode_base58btc(value: str) -> bytes:
    """Decode a base58btc multibase string ('z' prefix)."""
    if not value.startswith("z"):
        raise MultibaseError(f"expected base58btc, got prefix {value[:1]!r}")
    body = value[1:]
    number = 0
    for char in body:
        index = BASE58_ALPHABET.find(char)
        if index < 0:
            raise MultibaseError(f"invalid base58 character {char!r}")
        number = number * 58 + index

    leading_zeros = len(body) - len(body.lstrip("1"))
    payload = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\x00" * leading_zeros + payload


def read_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Read an unsigned LEB128 varint. Returns (value, next_offset)."""
    value = 0
    shift = 0
    while True:
        if offset >= len(data):
            raise MultibaseError("truncated varint")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
        if shift > 63:
            raise MultibaseError("varint too long")


def encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)

