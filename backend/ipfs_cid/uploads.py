# ipfs_cid/uploads.py
from typing import List

from fastapi import APIRouter, HTTPException, status

from .errors import ConfigError, InputError, IpfsCidError, NetworkError, UploadError
from .images import REMOTE_PATTERNS, is_allowed_image_url
from .ipfs import create_ipfs_cid_from_image_url
from .logging_config import logger
from .schemas import (
    IpfsCidRequest,
    IpfsCidResponse,
    RemoteImageCheck,
    RemotePatternRead,
)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

ERROR_STATUS = {
    InputError: status.HTTP_400_BAD_REQUEST,
    ConfigError: status.HTTP_503_SERVICE_UNAVAILABLE,
    NetworkError: status.HTTP_502_BAD_GATEWAY,
    UploadError: status.HTTP_502_BAD_GATEWAY,
}


@router.post("/ipfs", response_model=IpfsCidResponse)
async def create_ipfs_cid(body: IpfsCidRequest):
    """
    Fetch the image at `image_url` and store it on web3.storage.

    Returns the resulting CID and the media type reported by the image host.
    """
    try:
        return await create_ipfs_cid_from_image_url(body.image_url)
    except IpfsCidError as e:
        logger.warning(f"⚠️ CID request failed ({e.kind}): {e.message}")
        raise HTTPException(
            status_code=ERROR_STATUS.get(type(e), status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail={"kind": e.kind, "message": e.message},
        ) from e


@router.get("/remote-patterns", response_model=List[RemotePatternRead])
async def get_remote_patterns():
    """
    Remote image origins the web front end is allowed to optimize.
    """
    return [
        RemotePatternRead(
            protocol=pattern.protocol,
            hostname=pattern.hostname,
            pathname=pattern.pathname,
        )
        for pattern in REMOTE_PATTERNS
    ]


@router.get("/remote-patterns/check", response_model=RemoteImageCheck)
async def check_remote_image(url: str):
    """
    Whether `url` may be served through the web front end's image optimizer.
    """
    allowed = is_allowed_image_url(url)
    if not allowed:
        logger.info(f"Image URL not in remote patterns: {url}")
    return RemoteImageCheck(url=url, allowed=allowed)
