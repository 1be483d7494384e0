# ipfs_cid/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Settings(BaseSettings):
    # --- web3.storage (w3up) ---
    # Both are opaque strings produced by the w3 CLI (`w3 key create`,
    # `w3 delegation create --base64`). Absence is reported at client init.
    W3_DELEGATED_KEY: str | None = None
    W3_DELEGATED_PROOF: str | None = None
    # Upload service endpoint and its DID (audience of signed invocations)
    W3_UPLOAD_URL: str | None = None
    W3_SERVICE_DID: str = "did:web:up.storacha.network"

    # --- Environment ---
    ENVIRONMENT: str = "production"

    # Environment file location
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def require_w3_credentials(self) -> tuple[str, str]:
        """
        Return (key, proof) or raise a ConfigError naming the missing variable.
        """
        if not self.W3_DELEGATED_KEY:
            raise ConfigError("W3_DELEGATED_KEY is not set", field="W3_DELEGATED_KEY")
        if not self.W3_DELEGATED_PROOF:
            raise ConfigError(
                "W3_DELEGATED_PROOF isn't set", field="W3_DELEGATED_PROOF"
            )
        return self.W3_DELEGATED_KEY, self.W3_DELEGATED_PROOF

    def require_upload_url(self) -> str:
        if not self.W3_UPLOAD_URL:
            raise ConfigError("W3_UPLOAD_URL is not set", field="W3_UPLOAD_URL")
        return self.W3_UPLOAD_URL


@lru_cache
def get_settings():
    return Settings()
