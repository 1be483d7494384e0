# ipfs_cid/w3up/invocation.py
"""
Signed UCAN invocations.

The agent signs the dag-cbor encoding of the UCAN payload (every field but
``s``) with its ed25519 key and links the delegations that authorize it in
``prf``. The invocation block and the proof blocks travel together as one
CAR archive.
"""

import secrets
import time
from dataclasses import dataclass

from . import multibase
from .car import cid_for, encode_block, link, write_car
from .proof import Delegation, encode_principal
from .signer import Signer

UCAN_VERSION = "0.9.1"
EDDSA_SIGNATURE_CODE = 0xD0ED
DEFAULT_LIFETIME = 30


@dataclass(frozen=True)
class Invocation:
    cid: bytes
    blocks: dict[bytes, bytes]

    def archive(self) -> bytes:
        return write_car(self.cid, self.blocks)


def encode_signature(raw: bytes) -> bytes:
    return (
        multibase.encode_varint(EDDSA_SIGNATURE_CODE)
        + multibase.encode_varint(len(raw))
        + raw
    )


def invoke(
    issuer: Signer,
    audience: str,
    capability: dict,
    proofs: list[Delegation],
    lifetime: int = DEFAULT_LIFETIME,
    now: float | None = None,
) -> Invocation:
    issued_at = int(now if now is not None else time.time())
    payload = {
        "v": UCAN_VERSION,
        "iss": encode_principal(issuer.did()),
        "aud": encode_principal(audience),
        "att": [capability],
        "prf": [link(proof.cid) for proof in proofs],
        "exp": issued_at + lifetime,
        "nnc": secrets.token_hex(8),
        "fct": [],
    }
    signature = issuer.sign(encode_block(payload))
    block = encode_block({**payload, "s": encode_signature(signature)})
    cid = cid_for(block)

    blocks = {cid: block}
    for proof in proofs:
        blocks.update(proof.blocks)
    return Invocation(cid=cid, blocks=blocks)
