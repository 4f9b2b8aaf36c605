"""Connection settings read from ``S3_MULTIPART_*`` environment variables."""

from functools import lru_cache
from pydantic import Field
from pydantic import SecretStr
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class MultipartSettings(BaseSettings):
    endpoint_url: str | None = Field(
        default=None,
        description="S3-compatible endpoint, e.g. http://localhost:9000. "
        "Defaults to the regional AWS endpoint.",
    )
    region: str = "us-east-1"
    access_key: str | None = None
    secret_key: SecretStr | None = None
    session_token: SecretStr | None = None
    use_ssl: bool = True
    connect_timeout: int = Field(default=60, gt=0)
    read_timeout: int = Field(default=60, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="S3_MULTIPART_",
        case_sensitive=False,
        extra="forbid",
    )

    def open(self, **kwargs):
        """Build a MultipartClient; transport, signer and decoder pass through."""
        from s3_multipart.s3client import MultipartClient

        return MultipartClient(
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=_reveal(self.secret_key),
            aws_session_token=_reveal(self.session_token),
            use_ssl=self.use_ssl,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            **kwargs,
        )


def _reveal(secret):
    return secret.get_secret_value() if secret is not None else None


@lru_cache
def get_settings():
    return MultipartSettings()


def client_from_environment(**kwargs):
    return get_settings().open(**kwargs)
