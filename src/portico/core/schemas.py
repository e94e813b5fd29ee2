"""Auth flow schemas — token, profile, and result models handed to the host."""

from pydantic import BaseModel, ConfigDict, Field


class TokenData(BaseModel):
    """Token payload returned by a provider's token endpoint.

    Unknown fields in the provider response are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str | None = None
    scope: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
    id_token: str | None = None


class ProfileName(BaseModel):
    """Structured name parts, all best-effort."""
    family_name: str | None = None
    given_name: str | None = None
    middle_name: str | None = None


class UserProfile(BaseModel):
    """Provider-independent identity record."""
    provider: str
    provider_user_id: str = Field(min_length=1)
    display_name: str | None = None
    name: ProfileName = Field(default_factory=ProfileName)
    emails: list[str] = Field(default_factory=list)


class AuthData(BaseModel):
    """Result of a completed OAuth flow: the provider token and the user's profile."""
    token_data: TokenData
    user_info: UserProfile


class LocalAuthData(BaseModel):
    """Result of a completed local (username/password) flow."""
    user_info: UserProfile
