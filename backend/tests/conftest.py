"""
Shared fixtures: throwaway w3 credentials and a fake network.

Keys and delegations are generated the way the w3 CLI exports them, so the
real parsing code runs in every test. No request leaves the process.
"""
import base64
import hashlib

import cbor2
import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ipfs_cid.config import Settings
from ipfs_cid.w3up.multibase import encode_varint
from ipfs_cid.w3up.signer import did_from_public_key
from ipfs_cid.w3up_client import W3upClientProvider

UPLOAD_URL = "https://upload.test/upload"


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _raw_keypair() -> tuple[bytes, bytes]:
    private_key = Ed25519PrivateKey.generate()
    private_bytes = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return private_bytes, public_bytes


def make_key() -> tuple[str, bytes]:
    """Return (w3 key string, raw public key)."""
    private_bytes, public_bytes = _raw_keypair()
    raw = encode_varint(0x1300) + private_bytes + encode_varint(0xED) + public_bytes
    return "M" + base64.b64encode(raw).decode("ascii"), public_bytes


def _cid(block: bytes) -> bytes:
    # CIDv1, dag-cbor, sha2-256
    return b"\x01\x71\x12\x20" + hashlib.sha256(block).digest()


def _link(cid: bytes) -> cbor2.CBORTag:
    return cbor2.CBORTag(42, b"\x00" + cid)


def make_car(root: bytes, blocks: list[bytes]) -> bytes:
    header = cbor2.dumps({"roots": [_link(root)], "version": 1})
    out = encode_varint(len(header)) + header
    for block in blocks:
        cid = _cid(block)
        out += encode_varint(len(cid) + len(block)) + cid + block
    return out


def make_ucan(audience_public_key: bytes, exp=None, capabilities=None) -> tuple[bytes, str]:
    """Return (dag-cbor UCAN block, space DID) for a space delegated to the audience."""
    _, space_public = _raw_keypair()
    space_did = did_from_public_key(space_public)
    ucan = {
        "v": "0.9.1",
        "iss": encode_varint(0xED) + space_public,
        "aud": encode_varint(0xED) + audience_public_key,
        "att": capabilities
        if capabilities is not None
        else [
            {"with": space_did, "can": "space/blob/add"},
            {"with": space_did, "can": "upload/add"},
        ],
        "exp": exp,
        "prf": [],
        "s": b"\x00" * 64,
    }
    return cbor2.dumps(ucan), space_did


def make_proof(audience_public_key: bytes, exp=None, capabilities=None) -> tuple[str, str]:
    """
    Return (proof string, space DID) shaped like `w3 delegation create --base64`:
    an identity CID with the CAR codec wrapping a ucan@0.9.1 archive.
    """
    ucan_block, space_did = make_ucan(audience_public_key, exp, capabilities)
    root_block = cbor2.dumps({"ucan@0.9.1": _link(_cid(ucan_block))})
    car = make_car(_cid(root_block), [root_block, ucan_block])
    envelope = b"\x01" + encode_varint(0x0202) + b"\x00" + encode_varint(len(car)) + car
    return "m" + base64.b64encode(envelope).decode("ascii").rstrip("="), space_did


@pytest.fixture
def agent_credentials():
    """(key, proof, agent public key, space DID) for a valid delegation."""
    key, public_key = make_key()
    proof, space_did = make_proof(public_key)
    return key, proof, public_key, space_did


@pytest.fixture
def settings(agent_credentials):
    key, proof, _, _ = agent_credentials
    return Settings(
        _env_file=None,
        W3_DELEGATED_KEY=key,
        W3_DELEGATED_PROOF=proof,
        W3_UPLOAD_URL=UPLOAD_URL,
    )


class FakeNetwork:
    """
    Routes requests for the image hosts and the upload service.

    ``images`` maps URL to (status, content type, body); ``upload_response``
    is the JSON body the upload service answers with.
    """

    def __init__(self):
        self.images = {}
        self.upload_status = 200
        self.upload_response = {"cid": "bafkreigh2akiscaildcqabsyg3dfr6chu3fgpregiymsck7e7aqa4s52zy"}
        self.requests = []

    @property
    def uploads(self):
        return [r for r in self.requests if str(r.url) == UPLOAD_URL]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == UPLOAD_URL:
            return httpx.Response(self.upload_status, json=self.upload_response)

        status, content_type, body = self.images.get(
            str(request.url), (404, "text/plain", b"not found")
        )
        headers = {"content-type": content_type} if content_type else {}
        return httpx.Response(status, headers=headers, content=body)


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def http_client(network):
    return httpx.AsyncClient(transport=httpx.MockTransport(network.handler))


@pytest.fixture
def provider(settings, http_client):
    return W3upClientProvider(settings=settings, http_client=http_client)
