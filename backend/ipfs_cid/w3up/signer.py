# ipfs_cid/w3up/signer.py
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from . import multibase
from .errors import SignerParseError

# multicodec codes
ED25519_PRIVATE_CODE = 0x1300
ED25519_PUBLIC_CODE = 0xED
KEY_SIZE = 32


def did_from_public_key(public_key: bytes) -> str:
    """did:key identifier of a raw ed25519 public key."""
    return "did:key:" + multibase.encode_base58btc(
        multibase.encode_varint(ED25519_PUBLIC_CODE) + public_key
    )


class Signer:
    """
    An ed25519 identity as exported by `w3 key create`.

    The key string is multibase base64pad of
    ``varint(0x1300) | private key | varint(0xed) | public key``.
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self._private_key = private_key
        self._public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def parse(cls, key: str) -> "Signer":
        try:
            raw = multibase.decode(key.strip())
            code, offset = multibase.read_varint(raw)
        except multibase.MultibaseError as e:
            raise SignerParseError(f"Invalid signer key: {e}") from e

        if code != ED25519_PRIVATE_CODE:
            raise SignerParseError(
                f"Invalid signer key: expected ed25519 private key, got multicodec 0x{code:x}"
            )

        private_bytes = raw[offset : offset + KEY_SIZE]
        if len(private_bytes) != KEY_SIZE:
            raise SignerParseError("Invalid signer key: truncated private key")
        signer = cls(Ed25519PrivateKey.from_private_bytes(private_bytes))

        # The public half is optional in the encoding, but must agree if present.
        rest = raw[offset + KEY_SIZE :]
        if rest:
            try:
                public_code, public_offset = multibase.read_varint(rest)
            except multibase.MultibaseError as e:
                raise SignerParseError(f"Invalid signer key: {e}") from e
            embedded = rest[public_offset:]
            if public_code != ED25519_PUBLIC_CODE or embedded != signer._public_bytes:
                raise SignerParseError(
                    "Invalid signer key: public key does not match private key"
                )

        return signer

    @property
    def public_key(self) -> bytes:
        return self._public_bytes

    def did(self) -> str:
        return did_from_public_key(self._public_bytes)

    def sign(self, payload: bytes) -> bytes:
        """Raw 64-byte ed25519 signature of ``payload``."""
        return self._private_key.sign(payload)

    def __repr__(self):
        return f"Signer({self.did()})"
