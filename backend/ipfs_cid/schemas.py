from pydantic import BaseModel, ConfigDict, Field

# ====================================================================
# IPFS CID Schemas
# ====================================================================


class IpfsCidRequest(BaseModel):
    """Body of a CID request: the image to fetch and store."""

    image_url: str


class IpfsCidResponse(BaseModel):
    """
    Result of a successful upload.

    Serialized with the ``mediaType`` key the web front end expects.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cid: str
    media_type: str = Field(alias="mediaType")


# ====================================================================
# Image allow-list Schemas
# ====================================================================


class RemotePatternRead(BaseModel):
    protocol: str
    hostname: str
    pathname: str


class RemoteImageCheck(BaseModel):
    url: str
    allowed: bool
