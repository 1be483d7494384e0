# ipfs_cid/ipfs.py
import httpx

from .errors import InputError, NetworkError, UploadError
from .logging_config import logger
from .schemas import IpfsCidResponse
from .w3up import File
from .w3up_client import W3upClientProvider, w3up_provider

DEFAULT_FILENAME = "image"


def _failure_message(image_url: str, details: object) -> str:
    return (
        f"Failed to create IPFS CID for {image_url} using w3up-client. "
        f"Details: {details}"
    )


async def _fetch(image_url: str, http_client: httpx.AsyncClient | None) -> httpx.Response:
    if http_client is not None:
        return await http_client.get(image_url, follow_redirects=True)
    async with httpx.AsyncClient(follow_redirects=True) as http:
        return await http.get(image_url)


async def create_ipfs_cid_from_image_url(
    image_url: str,
    *,
    provider: W3upClientProvider | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> IpfsCidResponse:
    """
    Fetch an image and store it on web3.storage.

    Returns the CID of the stored file together with the media type the
    image server reported. Raises InputError, ConfigError, NetworkError or
    UploadError; nothing is retried.
    """
    if not isinstance(image_url, str) or not image_url:
        raise InputError("Image URL must be provided.")

    # ConfigError from initialization propagates as-is
    client = await (provider or w3up_provider).get_client()

    # --- 1. Fetch the image ---
    logger.info(f"Fetching image from: {image_url}")
    try:
        response = await _fetch(image_url, http_client)
    except httpx.HTTPError as e:
        logger.error(f"❌ Network error fetching {image_url}: {e!r}")
        raise NetworkError(_failure_message(image_url, e), url=image_url) from e

    if not response.is_success:
        details = (
            f"Failed to fetch image from {image_url}: "
            f"{response.status_code} {response.reason_phrase}"
        )
        logger.error(f"❌ {details}")
        raise NetworkError(
            _failure_message(image_url, details),
            url=image_url,
            status_code=response.status_code,
        )

    # Whatever the server declares is kept, image or not
    media_type = response.headers.get("content-type", "")
    image_file = File(response.content, name=DEFAULT_FILENAME, type=media_type)
    logger.info(
        f'Uploading "{image_file.name}" ({image_file.size} bytes, {media_type or "no type"}) '
        "using w3up-client..."
    )

    # --- 2. Upload to the current space ---
    try:
        cid = await client.upload_file(image_file)
    except Exception as e:
        logger.error(f"❌ Error during image upload with w3up-client: {e!r}")
        logger.error(
            f"Full error object for w3up operation: {getattr(e, '__dict__', {})!r}"
        )
        raise UploadError(_failure_message(image_url, e), url=image_url) from e

    logger.info(f"Stored file with CID (w3up): {cid}")

    if not cid or not str(cid):
        details = (
            "Failed to upload image via w3up-client: "
            "CID returned was null or undefined."
        )
        logger.error(f"❌ {details}")
        raise UploadError(_failure_message(image_url, details), url=image_url)

    logger.success(f"✅ Created IPFS CID {cid} for {image_url}")
    return IpfsCidResponse(cid=str(cid), media_type=media_type)
