# ipfs_cid/errors.py
"""
Error kinds raised by the CID pipeline.

Callers branch on the class (or on ``kind``) instead of parsing messages.
The underlying exception, when there is one, is chained as ``__cause__``.
"""


class IpfsCidError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(IpfsCidError):
    """Missing or invalid w3up credentials."""

    kind = "config"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InputError(IpfsCidError):
    """The caller did not provide a usable image URL."""

    kind = "input"


class NetworkError(IpfsCidError):
    """Fetching the image failed, or the server answered with a non-2xx status."""

    kind = "network"

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class UploadError(IpfsCidError):
    """The storage network rejected the upload or returned no CID."""

    kind = "upload"

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url
