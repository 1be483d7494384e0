# ipfs_cid/w3up/proof.py
"""
Delegation proofs as exported by `w3 delegation create --base64`.

The exported string is a multibase-encoded CIDv1 (codec CAR, identity
multihash) whose digest is a CARv1 archive. The archive root is either the
UCAN block itself or a ``{"ucan@<version>": <link>}`` wrapper pointing at it.
Bare CAR bytes (no CID envelope) are accepted as well.
"""

import time
from dataclasses import dataclass, field

import cbor2

from . import multibase
from .car import link_bytes, read_car
from .errors import ProofParseError
from .signer import did_from_public_key

CAR_CODEC = 0x0202
IDENTITY_HASH = 0x00
DID_CORE_CODE = 0x0D1D
ED25519_PUBLIC_CODE = 0xED


@dataclass(frozen=True)
class Capability:
    can: str
    with_: str


@dataclass(frozen=True)
class Delegation:
    issuer: str
    audience: str
    capabilities: list[Capability]
    expiration: float | None = None
    # CID of the UCAN block, and every block of the archive it came from
    cid: bytes = field(default=b"", repr=False)
    blocks: dict[bytes, bytes] = field(default_factory=dict, repr=False)

    def is_expired(self, now: float | None = None) -> bool:
        if self.expiration is None:
            return False
        return (now if now is not None else time.time()) >= self.expiration


def _unwrap_identity_cid(raw: bytes) -> bytes:
    """Return the CAR bytes inside a CAR-codec identity CID, or ``raw`` unchanged."""
    try:
        version, offset = multibase.read_varint(raw)
        codec, offset = multibase.read_varint(raw, offset)
        hash_code, offset = multibase.read_varint(raw, offset)
        size, offset = multibase.read_varint(raw, offset)
    except multibase.MultibaseError:
        return raw

    if version == 1 and codec == CAR_CODEC and hash_code == IDENTITY_HASH:
        if offset + size != len(raw):
            raise ProofParseError("Truncated delegation payload")
        return raw[offset:]
    return raw


def principal_did(value: bytes) -> str:
    """Decode a UCAN principal (multicodec-prefixed bytes) into a DID string."""
    code, offset = multibase.read_varint(value)
    if code == DID_CORE_CODE:
        return "did:" + value[offset:].decode("utf-8")
    if code == ED25519_PUBLIC_CODE:
        return did_from_public_key(value[offset:])
    return "did:key:" + multibase.encode_base58btc(value)


def encode_principal(did: str) -> bytes:
    """Inverse of principal_did: multicodec-prefixed bytes for a DID."""
    if did.startswith("did:key:"):
        try:
            return multibase.decode_base58btc(did[len("did:key:") :])
        except multibase.MultibaseError as e:
            raise ProofParseError(f"Invalid did:key {did!r}: {e}") from e
    if not did.startswith("did:"):
        raise ProofParseError(f"Not a DID: {did!r}")
    return multibase.encode_varint(DID_CORE_CODE) + did[len("did:") :].encode("utf-8")


def _decode_ucan(cid: bytes, blocks: dict[bytes, bytes]) -> Delegation:
    try:
        ucan = cbor2.loads(blocks[cid])
        capabilities = [
            Capability(can=str(cap["can"]), with_=str(cap["with"]))
            for cap in ucan["att"]
        ]
        exp = ucan.get("exp")
        return Delegation(
            issuer=principal_did(ucan["iss"]),
            audience=principal_did(ucan["aud"]),
            capabilities=capabilities,
            expiration=float(exp) if exp is not None else None,
            cid=cid,
            blocks=blocks,
        )
    except multibase.MultibaseError as e:
        raise ProofParseError(f"Invalid principal in delegation: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise ProofParseError(f"Invalid UCAN in delegation archive: {e}") from e


class Proof:
    @staticmethod
    def parse(proof: str) -> Delegation:
        try:
            raw = multibase.decode(proof.strip())
        except multibase.MultibaseError as e:
            raise ProofParseError(f"Invalid delegation proof: {e}") from e

        car = _unwrap_identity_cid(raw)
        root, blocks = read_car(car)
        if root not in blocks:
            raise ProofParseError("Delegation archive root block is missing")

        try:
            root_node = cbor2.loads(blocks[root])
        except cbor2.CBORDecodeError as e:
            raise ProofParseError(f"Invalid delegation archive root: {e}") from e

        if isinstance(root_node, dict) and len(root_node) == 1:
            (key, link), = root_node.items()
            if isinstance(key, str) and key.startswith("ucan@"):
                target = link_bytes(link)
                if target not in blocks:
                    raise ProofParseError("Delegation block referenced by archive is missing")
                return _decode_ucan(target, blocks)

        return _decode_ucan(root, blocks)
