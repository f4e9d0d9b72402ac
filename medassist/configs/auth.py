"""
Authentication configuration settings.

Verification parameters for bearer JWTs issued by the identity service.

Dependencies: pydantic, pydantic_settings
System role: Token verification configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from medassist.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """JWT verification configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JWT_",
        case_sensitive=False,
        extra="ignore",
    )

    secret_key: str = Field(default="change-me", description="Shared HMAC secret for tokens")
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    user_id_claim: str = Field(default="id", description="Claim holding the user identifier")
