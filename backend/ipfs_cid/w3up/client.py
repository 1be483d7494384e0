# ipfs_cid/w3up/client.py
"""
A small w3up client: an agent identity, the spaces it was delegated, and a
single-file upload to the current space.

Chunking and CID computation are done by the upload service. Each upload
carries an `upload/add` invocation signed by the agent key, with the space
delegation attached as its proof; the file digest is part of the signed
capability.
"""

from dataclasses import dataclass

import httpx

from .car import multihash_sha256
from .errors import SpaceError, UploadRequestError
from .invocation import invoke
from .proof import Delegation
from .signer import Signer

DEFAULT_SERVICE_DID = "did:web:up.storacha.network"
UPLOAD_ABILITY = "upload/add"


@dataclass(frozen=True)
class File:
    content: bytes
    name: str
    type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Link:
    """A content identifier returned by the storage network."""

    cid: str

    def __str__(self):
        return self.cid


@dataclass(frozen=True)
class Space:
    delegation: Delegation

    def did(self) -> str:
        return self.delegation.capabilities[0].with_


class StoreMemory:
    """Agent data kept only for the lifetime of the process."""

    def __init__(self):
        self._data = {}

    def load(self) -> dict:
        return dict(self._data)

    def save(self, data: dict) -> None:
        self._data = dict(data)


class Client:
    def __init__(
        self,
        principal: Signer,
        store: StoreMemory,
        upload_url: str,
        service_did: str = DEFAULT_SERVICE_DID,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.principal = principal
        self.store = store
        self.upload_url = upload_url
        self.service_did = service_did
        self._http_client = http_client

    def did(self) -> str:
        return self.principal.did()

    async def add_space(self, proof: Delegation) -> Space:
        """
        Register a delegated space.

        The delegation must name at least one resource, be addressed to this
        agent and still be valid.
        """
        if not proof.capabilities:
            raise SpaceError("Delegation grants no capabilities")
        if proof.audience != self.did():
            raise SpaceError(
                f"Delegation is for {proof.audience}, not for agent {self.did()}"
            )
        if proof.is_expired():
            raise SpaceError("Delegation has expired")

        space = Space(proof)
        data = self.store.load()
        spaces = dict(data.get("spaces", {}))
        spaces[space.did()] = space
        data["spaces"] = spaces
        self.store.save(data)
        return space

    async def set_current_space(self, did: str) -> None:
        data = self.store.load()
        if did not in data.get("spaces", {}):
            raise SpaceError(f"Agent has no delegation for space {did}")
        data["current_space"] = did
        self.store.save(data)

    def current_space(self) -> Space | None:
        data = self.store.load()
        did = data.get("current_space")
        return data.get("spaces", {}).get(did) if did else None

    async def upload_file(self, file: File) -> Link | None:
        """
        Upload a single file to the current space.

        Returns the CID reported by the service, or None if it reported none.
        """
        space = self.current_space()
        if space is None:
            raise SpaceError("No current space set; call set_current_space() first")

        invocation = invoke(
            self.principal,
            self.service_did,
            {
                "with": space.did(),
                "can": UPLOAD_ABILITY,
                "nb": {
                    "digest": multihash_sha256(file.content),
                    "size": file.size,
                    "name": file.name,
                    "type": file.type,
                },
            },
            [space.delegation],
        )
        files = {
            "invocation": (
                "invocation.car",
                invocation.archive(),
                "application/vnd.ipld.car",
            ),
            "file": (file.name, file.content, file.type or "application/octet-stream"),
        }

        if self._http_client is not None:
            response = await self._http_client.post(self.upload_url, files=files)
        else:
            async with httpx.AsyncClient() as http:
                response = await http.post(self.upload_url, files=files)

        if not response.is_success:
            raise UploadRequestError(
                f"Upload rejected by {self.upload_url}: "
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadRequestError(f"Upload response is not JSON: {e}") from e

        cid = payload.get("cid") if isinstance(payload, dict) else None
        # Some gateways answer {"cid": {"/": "bafy..."}} (dag-json link form)
        if isinstance(cid, dict):
            cid = cid.get("/")
        return Link(str(cid)) if cid else None


async def create(
    principal: Signer,
    store: StoreMemory,
    upload_url: str,
    service_did: str = DEFAULT_SERVICE_DID,
    http_client: httpx.AsyncClient | None = None,
) -> Client:
    """Create a client bound to ``principal`` and persist its identity in ``store``."""
    data = store.load()
    data["principal"] = principal.did()
    store.save(data)
    return Client(
        principal,
        store,
        upload_url=upload_url,
        service_did=service_did,
        http_client=http_client,
    )
