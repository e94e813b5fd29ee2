"""Profile normalizers — map raw provider JSON into ``UserProfile``.

Each mapper takes the strategy's fixed provider name, the decoded profile
JSON and the ``TokenData`` already obtained for the flow. Only the provider
user id is mandatory; every other field is filled in when present.
"""

from __future__ import annotations

from typing import Any, Callable

from portico.core.errors import ProfileFetchError
from portico.core.schemas import ProfileName, TokenData, UserProfile

MapProfileFn = Callable[[str, dict[str, Any], TokenData], UserProfile]


def _require_id(provider_name: str, raw: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return str(value)
    raise ProfileFetchError(
        f"Could not determine user ID from {provider_name} response",
        code="oauth_no_user_id",
        status_code=400,
    )


def _str_or_none(value: Any) -> str | None:
    """``value`` if it is a non-empty string, else None."""
    return value if isinstance(value, str) and value else None


def _emails(*candidates: Any) -> list[str]:
    return [c for c in candidates if _str_or_none(c)]


def _split_full_name(full_name: Any) -> ProfileName:
    """Best-effort split of a single display string into name parts.

    The last word is taken as the family name, the first as the given name,
    and anything in between as the middle name.
    """
    if not isinstance(full_name, str) or not full_name.strip():
        return ProfileName()
    parts = full_name.split()
    if len(parts) == 1:
        return ProfileName(given_name=parts[0])
    return ProfileName(
        given_name=parts[0],
        middle_name=" ".join(parts[1:-1]) or None,
        family_name=parts[-1],
    )


def map_spotify_profile(
    provider_name: str, raw: dict[str, Any], token: TokenData,
) -> UserProfile:
    """Spotify ``/v1/me``: ``id``, ``display_name``, ``email``."""
    return UserProfile(
        provider=provider_name,
        provider_user_id=_require_id(provider_name, raw, "id"),
        display_name=_str_or_none(raw.get("display_name")),
        name=_split_full_name(raw.get("display_name")),
        emails=_emails(raw.get("email")),
    )


def map_github_profile(
    provider_name: str, raw: dict[str, Any], token: TokenData,
) -> UserProfile:
    """GitHub ``/user``: numeric ``id``, ``login``, optional ``name`` and public ``email``."""
    return UserProfile(
        provider=provider_name,
        provider_user_id=_require_id(provider_name, raw, "id"),
        display_name=_str_or_none(raw.get("login")) or _str_or_none(raw.get("name")),
        name=_split_full_name(raw.get("name")),
        emails=_emails(raw.get("email")),
    )


def map_default_profile(
    provider_name: str, raw: dict[str, Any], token: TokenData,
) -> UserProfile:
    """Map a userinfo response using common field names.

    Tries ``id`` or OIDC ``sub`` for the user id, ``name`` or
    ``preferred_username`` for the display name, ``given_name`` /
    ``family_name`` / ``middle_name`` for the name parts and ``email`` for
    the address.
    """
    account_id = _require_id(provider_name, raw, "id", "sub")

    if any(_str_or_none(raw.get(k)) for k in ("given_name", "family_name", "middle_name")):
        name = ProfileName(
            given_name=_str_or_none(raw.get("given_name")),
            family_name=_str_or_none(raw.get("family_name")),
            middle_name=_str_or_none(raw.get("middle_name")),
        )
    else:
        name = _split_full_name(raw.get("name"))

    return UserProfile(
        provider=provider_name,
        provider_user_id=account_id,
        display_name=(
            _str_or_none(raw.get("name")) or _str_or_none(raw.get("preferred_username"))
        ),
        name=name,
        emails=_emails(raw.get("email")),
    )
