# ipfs_cid/w3up/car.py
"""CARv1 archives of dag-cbor blocks."""

import hashlib

import cbor2

from . import multibase
from .errors import ProofParseError

CID_LINK_TAG = 42
DAG_CBOR_CODE = 0x71
RAW_CODE = 0x55
SHA2_256_CODE = 0x12


def multihash_sha256(data: bytes) -> bytes:
    digest = hashlib.sha256(data).digest()
    return multibase.encode_varint(SHA2_256_CODE) + multibase.encode_varint(len(digest)) + digest


def cid_for(block: bytes, codec: int = DAG_CBOR_CODE) -> bytes:
    """CIDv1 bytes of ``block`` (sha2-256)."""
    return multibase.encode_varint(1) + multibase.encode_varint(codec) + multihash_sha256(block)


def link(cid: bytes) -> cbor2.CBORTag:
    # dag-cbor prefixes links with the multibase identity byte
    return cbor2.CBORTag(CID_LINK_TAG, b"\x00" + cid)


def link_bytes(value) -> bytes:
    if not isinstance(value, cbor2.CBORTag) or value.tag != CID_LINK_TAG:
        raise ProofParseError("Expected a CID link in delegation archive")
    return bytes(value.value)[1:]


def encode_block(node) -> bytes:
    return cbor2.dumps(node, canonical=True)


def _read_cid(data: bytes, offset: int) -> tuple[bytes, int]:
    """Return (cid_bytes, next_offset) for a CID starting at ``offset``."""
    start = offset
    # CIDv0 is a bare sha2-256 multihash
    if data[offset : offset + 2] == b"\x12\x20":
        return data[offset : offset + 34], offset + 34

    _version, offset = multibase.read_varint(data, offset)
    _codec, offset = multibase.read_varint(data, offset)
    _hash_code, offset = multibase.read_varint(data, offset)
    digest_size, offset = multibase.read_varint(data, offset)
    end = offset + digest_size
    if end > len(data):
        raise ProofParseError("Truncated CID in delegation archive")
    return data[start:end], end


def read_car(data: bytes) -> tuple[bytes, dict[bytes, bytes]]:
    """Parse a CARv1 archive into (root_cid, {cid: block})."""
    try:
        header_size, offset = multibase.read_varint(data)
        header = cbor2.loads(data[offset : offset + header_size])
        offset += header_size
        if not isinstance(header, dict) or header.get("version") != 1:
            raise ProofParseError("Unsupported delegation archive version")
        roots = header.get("roots") or []
        if not roots:
            raise ProofParseError("Delegation archive has no root")
        root = link_bytes(roots[0])

        blocks = {}
        while offset < len(data):
            section_size, offset = multibase.read_varint(data, offset)
            section_end = offset + section_size
            cid, block_start = _read_cid(data, offset)
            blocks[cid] = data[block_start:section_end]
            offset = section_end
    except (multibase.MultibaseError, cbor2.CBORDecodeError) as e:
        raise ProofParseError(f"Invalid delegation archive: {e}") from e

    return root, blocks


def write_car(root: bytes, blocks: dict[bytes, bytes]) -> bytes:
    header = encode_block({"roots": [link(root)], "version": 1})
    out = bytearray(multibase.encode_varint(len(header)) + header)
    for cid, block in blocks.items():
        out += multibase.encode_varint(len(cid) + len(block)) + cid + block
    return bytes(out)
