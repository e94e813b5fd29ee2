"""Tests for the per-provider profile normalizers."""

import pytest

from portico.core.errors import ProfileFetchError
from portico.core.profiles import map_default_profile, map_github_profile, map_spotify_profile
from portico.core.schemas import TokenData, UserProfile

TOKEN = TokenData(access_token="tok")


class TestSpotifyProfile:
    def test_full_profile(self):
        profile = map_spotify_profile("spotify", {
            "id": "wizzler",
            "display_name": "JM Wizzler",
            "email": "email@example.com",
            "country": "SE",
        }, TOKEN)

        assert isinstance(profile, UserProfile)
        assert profile.provider == "spotify"
        assert profile.provider_user_id == "wizzler"
        assert profile.display_name == "JM Wizzler"
        assert profile.name.given_name == "JM"
        assert profile.name.family_name == "Wizzler"
        assert profile.emails == ["email@example.com"]

    def test_only_id(self):
        profile = map_spotify_profile("spotify", {"id": "abc"}, TOKEN)
        assert profile.provider_user_id == "abc"
        assert profile.display_name is None
        assert profile.emails == []

    def test_null_display_name(self):
        profile = map_spotify_profile("spotify", {"id": "abc", "display_name": None}, TOKEN)
        assert profile.display_name is None
        assert profile.name.given_name is None

    def test_missing_id(self):
        with pytest.raises(ProfileFetchError) as exc_info:
            map_spotify_profile("spotify", {"display_name": "No Id"}, TOKEN)
        assert exc_info.value.code == "oauth_no_user_id"


class TestGitHubProfile:
    def test_full_profile(self):
        profile = map_github_profile("github", {
            "id": 12345,
            "login": "octocat",
            "name": "The Octocat",
            "email": "octocat@github.com",
        }, TOKEN)

        assert profile.provider == "github"
        assert profile.provider_user_id == "12345"
        assert profile.display_name == "octocat"
        assert profile.name.given_name == "The"
        assert profile.name.family_name == "Octocat"
        assert profile.emails == ["octocat@github.com"]

    def test_three_part_name(self):
        profile = map_github_profile("github", {"id": 1, "name": "Ada King Lovelace"}, TOKEN)
        assert profile.name.given_name == "Ada"
        assert profile.name.middle_name == "King"
        assert profile.name.family_name == "Lovelace"

    def test_private_email_and_no_name(self):
        profile = map_github_profile("github", {
            "id": 1, "login": "user", "name": None, "email": None,
        }, TOKEN)
        assert profile.display_name == "user"
        assert profile.emails == []
        assert profile.name.family_name is None

    def test_id_zero_is_kept(self):
        profile = map_github_profile("github", {"id": 0}, TOKEN)
        assert profile.provider_user_id == "0"

    def test_missing_id(self):
        with pytest.raises(ProfileFetchError):
            map_github_profile("github", {"login": "octocat"}, TOKEN)

    def test_null_id(self):
        with pytest.raises(ProfileFetchError):
            map_github_profile("github", {"id": None, "login": "octocat"}, TOKEN)


class TestDefaultProfile:
    def test_oidc_claims(self):
        profile = map_default_profile("keycloak", {
            "sub": "uid-1",
            "name": "Jane Q Doe",
            "given_name": "Jane",
            "family_name": "Doe",
            "email": "jane@example.com",
        }, TOKEN)

        assert profile.provider == "keycloak"
        assert profile.provider_user_id == "uid-1"
        assert profile.display_name == "Jane Q Doe"
        assert profile.name.given_name == "Jane"
        assert profile.name.family_name == "Doe"
        assert profile.name.middle_name is None
        assert profile.emails == ["jane@example.com"]

    def test_id_preferred_over_sub(self):
        profile = map_default_profile("x", {"id": 7, "sub": "s"}, TOKEN)
        assert profile.provider_user_id == "7"

    def test_preferred_username_fallback(self):
        profile = map_default_profile("x", {"sub": "s", "preferred_username": "jdoe"}, TOKEN)
        assert profile.display_name == "jdoe"

    def test_missing_id(self):
        with pytest.raises(ProfileFetchError, match="Could not determine user ID from x"):
            map_default_profile("x", {"email": "a@b.c"}, TOKEN)

    def test_wrong_typed_optional_fields_are_dropped(self):
        profile = map_default_profile("x", {
            "id": 7,
            "name": {"first": "Jane"},
            "given_name": 42,
            "preferred_username": ["jdoe"],
            "email": {"primary": "a@b.c"},
        }, TOKEN)

        assert profile.provider_user_id == "7"
        assert profile.display_name is None
        assert profile.name.given_name is None
        assert profile.name.family_name is None
        assert profile.emails == []

    def test_wrong_typed_claim_falls_back_to_full_name(self):
        profile = map_default_profile("x", {"sub": "s", "given_name": 42, "name": "Jane Doe"}, TOKEN)
        assert profile.name.given_name == "Jane"
        assert profile.name.family_name == "Doe"


class TestWrongTypedProviderFields:
    def test_spotify_display_name_object(self):
        profile = map_spotify_profile("spotify", {"id": "abc", "display_name": {"x": 1}}, TOKEN)
        assert profile.display_name is None
        assert profile.name.given_name is None

    def test_github_numeric_login(self):
        profile = map_github_profile("github", {"id": 1, "login": 99, "name": "Mona Lisa"}, TOKEN)
        assert profile.display_name == "Mona Lisa"
        assert profile.name.family_name == "Lisa"
