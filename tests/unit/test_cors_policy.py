"""Unit tests for the origin allow-list policy."""

import pytest

from gateway.app.errors import OriginNotAllowedError
from gateway.app.middleware.cors import CorsPolicy, OriginDecision

ALLOW_LIST = ["http://localhost:4000", "https://studio.apollographql.com"]


class TestEvaluate:
    """Test CorsPolicy.evaluate."""

    @pytest.mark.parametrize("origin", ALLOW_LIST)
    def test_listed_origins_are_allowed(self, origin: str) -> None:
        policy = CorsPolicy(ALLOW_LIST)
        assert policy.evaluate(origin) is OriginDecision.ALLOW

    @pytest.mark.parametrize(
        "origin",
        [
            "https://evil.example",
            "http://localhost:3000",
            "https://studio.apollographql.com.evil.example",
            "https://studio.apollographql.com/",
            "http://localhost",
        ],
    )
    def test_unlisted_origins_are_denied(self, origin: str) -> None:
        policy = CorsPolicy(ALLOW_LIST)
        assert policy.evaluate(origin) is OriginDecision.DENY

    def test_match_is_case_sensitive(self) -> None:
        policy = CorsPolicy(ALLOW_LIST)
        assert policy.evaluate("HTTPS://STUDIO.APOLLOGRAPHQL.COM") is OriginDecision.DENY

    def test_missing_origin_is_allowed(self) -> None:
        """Non-browser clients send no Origin header."""
        assert CorsPolicy(ALLOW_LIST).evaluate(None) is OriginDecision.ALLOW
        assert CorsPolicy([]).evaluate(None) is OriginDecision.ALLOW

    def test_empty_allow_list_denies_every_origin(self) -> None:
        policy = CorsPolicy([])
        assert policy.evaluate("http://localhost:4000") is OriginDecision.DENY

    def test_empty_origin_string_is_allowed(self) -> None:
        """An empty Origin header counts as no origin."""
        assert CorsPolicy(ALLOW_LIST).evaluate("") is OriginDecision.ALLOW
        assert CorsPolicy([]).evaluate("") is OriginDecision.ALLOW

    def test_malformed_origin_does_not_raise(self) -> None:
        policy = CorsPolicy(ALLOW_LIST)
        assert policy.evaluate("\x00not a url\udcff") is OriginDecision.DENY


class TestCheck:
    """Test CorsPolicy.check."""

    def test_allowed_origin_passes(self) -> None:
        CorsPolicy(ALLOW_LIST).check("https://studio.apollographql.com")

    def test_denied_origin_raises_policy_violation(self) -> None:
        with pytest.raises(OriginNotAllowedError) as exc_info:
            CorsPolicy(ALLOW_LIST).check("https://evil.example")

        assert exc_info.value.origin == "https://evil.example"
        assert "CORS policy" in str(exc_info.value)


def test_allow_list_is_a_snapshot() -> None:
    """Mutating the source list after construction does not change the policy."""
    origins = ["http://localhost:4000"]
    policy = CorsPolicy(origins)
    origins.append("https://evil.example")

    assert policy.allow_list == ("http://localhost:4000",)
    assert policy.evaluate("https://evil.example") is OriginDecision.DENY
