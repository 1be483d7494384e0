# ipfs_cid/w3up_client.py
import asyncio

import httpx

from .config import Settings, get_settings
from .errors import ConfigError
from .logging_config import logger
from .w3up import Client, Proof, Signer, StoreMemory, create


class W3upClientProvider:
    """
    Builds the w3up client once and hands the same instance to every caller.

    Initialization runs under a lock so concurrent first requests share one
    attempt. A failed attempt leaves nothing cached, so the next call starts
    over from the environment.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings
        self._http_client = http_client
        self._client: Client | None = None
        self._lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else get_settings()

    @property
    def client(self) -> Client | None:
        return self._client

    def reset(self) -> None:
        self._client = None

    async def get_client(self) -> Client:
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self._client = await self._initialize()
        return self._client

    async def _initialize(self) -> Client:
        try:
            logger.info("🔑 Initializing w3up-client...")
            settings = self.settings
            key, proof_value = settings.require_w3_credentials()
            upload_url = settings.require_upload_url()

            principal = Signer.parse(key)
            store = StoreMemory()
            client = await create(
                principal,
                store,
                upload_url=upload_url,
                service_did=settings.W3_SERVICE_DID,
                http_client=self._http_client,
            )

            proof = Proof.parse(proof_value)
            space = await client.add_space(proof)
            await client.set_current_space(space.did())
        except Exception as e:
            logger.critical(f"🔥 Failed to create/initialize w3up-client: {e!r}")
            # Reset on failure to allow retry on subsequent calls
            self.reset()
            raise ConfigError(
                "Failed to initialize w3up-client. Ensure the server environment "
                f"is correctly configured. Details: {e}",
                field=getattr(e, "field", None),
            ) from e

        logger.success(
            f"✅ w3up-client ready: agent {client.did()} uploading to space {space.did()}"
        )
        return client


# Process-wide provider, wired into the app lifespan and the upload route
w3up_provider = W3upClientProvider()


async def get_w3up_client() -> Client:
    return await w3up_provider.get_client()
