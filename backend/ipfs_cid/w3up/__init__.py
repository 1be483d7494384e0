from .client import Client, File, Link, Space, StoreMemory, create
from .errors import (
    ProofParseError,
    SignerParseError,
    SpaceError,
    UploadRequestError,
    W3upError,
)
from .proof import Delegation, Proof
from .signer import Signer

__all__ = [
    "Client",
    "Delegation",
    "File",
    "Link",
    "Proof",
    "ProofParseError",
    "Signer",
    "SignerParseError",
    "Space",
    "SpaceError",
    "StoreMemory",
    "UploadRequestError",
    "W3upError",
    "create",
]
