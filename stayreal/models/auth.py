"""
Domain models for credential persistence.
"""

from pydantic import BaseModel, ConfigDict, Field


class AuthenticationDetails(BaseModel):
    """The device's authentication triple as held by the credential store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_id: str = Field(..., alias="deviceId", min_length=1)
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    def with_tokens(self, pair: "TokenPair") -> "AuthenticationDetails":
        """Return new details carrying ``pair`` while keeping this device id."""
        return AuthenticationDetails(
            device_id=self.device_id,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )


class TokenPair(BaseModel):
    """Fresh access/refresh pair minted by the token endpoint."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires_in: int | None = None


__all__ = ["AuthenticationDetails", "TokenPair"]
