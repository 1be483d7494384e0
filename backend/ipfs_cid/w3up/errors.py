# ipfs_cid/w3up/errors.py


class W3upError(Exception):
    """Base class for failures inside the w3up client layer."""


class SignerParseError(W3upError):
    pass


class ProofParseError(W3upError):
    pass


class SpaceError(W3upError):
    """The delegation cannot be used as an upload target by this agent."""


class UploadRequestError(W3upError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
