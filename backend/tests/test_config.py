import pytest

from ipfs_cid.config import Settings
from ipfs_cid.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("W3_DELEGATED_KEY", "W3_DELEGATED_PROOF", "W3_UPLOAD_URL", "W3_SERVICE_DID", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.W3_DELEGATED_KEY is None
    assert settings.W3_DELEGATED_PROOF is None
    assert settings.W3_UPLOAD_URL is None
    assert settings.W3_SERVICE_DID == "did:web:up.storacha.network"
    assert settings.ENVIRONMENT == "production"


def test_reads_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("W3_DELEGATED_KEY", "MgCkey")
    monkeypatch.setenv("W3_DELEGATED_PROOF", "mAYIEAproof")

    assert Settings(_env_file=None).require_w3_credentials() == ("MgCkey", "mAYIEAproof")


@pytest.mark.parametrize(
    "key, proof, missing",
    [
        (None, "p", "W3_DELEGATED_KEY"),
        ("", "p", "W3_DELEGATED_KEY"),
        ("k", None, "W3_DELEGATED_PROOF"),
        (None, None, "W3_DELEGATED_KEY"),
    ],
)
def test_require_credentials_names_missing_field(key, proof, missing):
    settings = Settings(_env_file=None, W3_DELEGATED_KEY=key, W3_DELEGATED_PROOF=proof)

    with pytest.raises(ConfigError) as exc_info:
        settings.require_w3_credentials()

    assert exc_info.value.field == missing
    assert exc_info.value.kind == "config"


def test_require_upload_url():
    with pytest.raises(ConfigError) as exc_info:
        Settings(_env_file=None).require_upload_url()
    assert exc_info.value.field == "W3_UPLOAD_URL"

    settings = Settings(_env_file=None, W3_UPLOAD_URL="https://upload.example/upload")
    assert settings.require_upload_url() == "https://upload.example/upload"
