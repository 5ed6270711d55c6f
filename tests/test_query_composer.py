"""Tests de la composición de parámetros de consulta."""

from __future__ import annotations

from datetime import date

import pytest

from core.domain.decoding import DecodeTarget
from core.domain.models import AccountIdentity
from core.endpoints import API_URL, PROFILES_URL
from core.errors import MissingIdentityError, ResponseDecodeError
from core.services.query_composer import (
    QueryComposer,
    build_default_params,
    merge_layers,
    one_month_before,
)

IDENTITY = AccountIdentity(access_token="tok", account_id="ga:1234")


@pytest.fixture
def composer(transport):
    return QueryComposer(transport)


class TestMergeLayers:
    def test_later_layer_wins(self):
        merged = merge_layers(
            {"metrics": "ga:visits", "start-date": "2024-01-01"},
            {"metrics": "ga:sessions"},
            {"max-results": 10},
            {"metrics": 0},
        )
        assert merged == {"metrics": 0, "start-date": "2024-01-01", "max-results": 10}

    def test_skips_empty_layers(self):
        assert merge_layers(None, {}, {"a": "1"}, None) == {"a": "1"}

    def test_preserves_first_insertion_order(self):
        assert list(merge_layers({"a": 1, "b": 2}, {"a": 3, "c": 4})) == ["a", "b", "c"]


class TestDefaults:
    def test_default_params(self):
        assert build_default_params(date(2024, 5, 17)) == {
            "start-date": "2024-04-17",
            "end-date": "2024-05-17",
            "metrics": "ga:visits",
        }

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2024, 3, 31), date(2024, 2, 29)),
            (date(2023, 3, 31), date(2023, 2, 28)),
            (date(2024, 1, 15), date(2023, 12, 15)),
            (date(2024, 7, 31), date(2024, 6, 30)),
        ],
    )
    def test_one_month_before(self, day, expected):
        assert one_month_before(day) == expected


class TestExecute:
    def test_override_wins_scenario(self, composer, transport):
        composer.execute(
            IDENTITY,
            {"metrics": "ga:visits"},
            {"metrics": "ga:pageviews", "dimensions": "ga:date"},
        )

        params = transport.last.params
        assert params["metrics"] == "ga:pageviews"
        assert params["dimensions"] == "ga:date"

    def test_identity_is_forced_over_defaults(self, composer, transport):
        composer.execute(IDENTITY, {"ids": "ga:stale", "access_token": "stale"}, {})

        assert transport.last.params["ids"] == "ga:1234"
        assert transport.last.params["access_token"] == "tok"

    def test_per_call_params_win_over_identity(self, composer, transport):
        composer.execute(IDENTITY, {}, {"ids": "ga:9999"})
        assert transport.last.params["ids"] == "ga:9999"

    def test_get_against_reporting_endpoint(self, composer, transport):
        composer.execute(IDENTITY, build_default_params(date(2024, 5, 17)), {"max-results": 50})

        sent = transport.last
        assert sent.url == API_URL
        assert sent.as_post is False
        assert sent.params == {
            "start-date": "2024-04-17",
            "end-date": "2024-05-17",
            "metrics": "ga:visits",
            "access_token": "tok",
            "ids": "ga:1234",
            "max-results": "50",
        }

    @pytest.mark.parametrize(
        ("identity", "missing"),
        [
            (AccountIdentity(access_token="tok", account_id=""), ("account_id",)),
            (AccountIdentity(access_token="", account_id="ga:1"), ("access_token",)),
            (AccountIdentity(), ("access_token", "account_id")),
        ],
    )
    def test_missing_identity(self, composer, transport, identity, missing):
        with pytest.raises(MissingIdentityError) as excinfo:
            composer.execute(identity, {"metrics": "ga:visits"}, {})

        assert excinfo.value.missing == missing
        assert transport.calls == []

    def test_error_status_is_returned(self, composer, transport):
        transport.queue({"error": {"code": 401, "message": "Invalid Credentials"}}, status_code=401)

        response = composer.execute(IDENTITY, {}, {})

        assert response.status_code == 401
        assert not response.ok
        assert response.data["error"]["code"] == 401

    def test_object_decoding(self, composer, transport):
        transport.queue({"totalsForAllResults": {"ga:visits": "42"}, "rows": [["20240101", "42"]]})

        response = composer.execute(IDENTITY, {}, {}, decode=DecodeTarget.OBJECT)

        assert getattr(response.data.totalsForAllResults, "ga:visits") == "42"
        assert response.data.rows == [["20240101", "42"]]

    def test_non_json_error_page_is_returned(self, composer, transport):
        transport.queue("<html>502 Bad Gateway</html>", status_code=502)

        response = composer.execute(IDENTITY, {}, {})

        assert response.status_code == 502
        assert not response.ok
        assert response.data is None
        assert response.text == "<html>502 Bad Gateway</html>"

    def test_invalid_json_on_success_raises_decode_error(self, composer, transport):
        transport.queue("<html>oops</html>", status_code=200)

        with pytest.raises(ResponseDecodeError) as excinfo:
            composer.execute(IDENTITY, {}, {})
        assert excinfo.value.status_code == 200
        assert excinfo.value.body == "<html>oops</html>"


class TestManagement:
    def test_only_access_token_is_sent(self, composer, transport):
        composer.fetch_management(PROFILES_URL, "tok")

        assert transport.last.url == PROFILES_URL
        assert transport.last.params == {"access_token": "tok"}

    def test_requires_access_token(self, composer, transport):
        with pytest.raises(MissingIdentityError):
            composer.fetch_management(PROFILES_URL, "")
        assert transport.calls == []
