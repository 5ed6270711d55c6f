"""Tests del facade `AnalyticsClient`."""

from __future__ import annotations

from datetime import date

import pytest

from adapters.oauth_service import ServiceAccountStrategy
from adapters.oauth_web import WebApplicationStrategy
from core.config import AppSettings
from core.domain.decoding import DecodeTarget
from core.endpoints import PROFILES_URL, WEBPROPERTIES_URL
from core.errors import MissingIdentityError
from core.services.analytics_client import AnalyticsClient
from core.services.presets import SHORTCUT_PRESETS


@pytest.fixture
def client(web_credential, transport):
    client = AnalyticsClient(
        WebApplicationStrategy(web_credential, transport),
        transport,
        today=date(2024, 5, 17),
    )
    client.set_access_token("tok")
    client.set_account_id("ga:1234")
    return client


def test_process_defaults_use_injected_date(client):
    assert client.default_query_params == {
        "start-date": "2024-04-17",
        "end-date": "2024-05-17",
        "metrics": "ga:visits",
    }


def test_facade_defaults_layer_over_process_defaults(client, transport):
    client.set_default_query_params({"start-date": "2024-01-01", "max-results": 100})
    client.set_default_query_params({"end-date": "2024-01-31"})

    client.query({"max-results": 5})

    params = transport.last.params
    assert params["start-date"] == "2024-01-01"
    assert params["end-date"] == "2024-01-31"
    assert params["metrics"] == "ga:visits"
    assert params["max-results"] == "5"


def test_query_requires_identity(web_credential, transport):
    client = AnalyticsClient(WebApplicationStrategy(web_credential, transport), transport)
    client.set_access_token("tok")

    with pytest.raises(MissingIdentityError):
        client.query()
    assert transport.calls == []


def test_identity_may_be_set_after_construction(web_credential, transport):
    client = AnalyticsClient(WebApplicationStrategy(web_credential, transport), transport)
    client.set_access_token("late-token")
    client.set_account_id(1234)

    client.query()
    assert transport.last.params["ids"] == "1234"
    assert transport.last.params["access_token"] == "late-token"


def test_shortcut_preset_then_overrides(client, transport):
    client.visits_by_countries({"sort": "ga:visits", "max-results": 10})

    params = transport.last.params
    assert params["dimensions"] == "ga:country"
    assert params["metrics"] == "ga:visits"
    assert params["sort"] == "ga:visits"
    assert params["max-results"] == "10"


def test_mobile_shortcut_carries_segment(client, transport):
    client.visits_by_mobile_os()
    assert transport.last.params["segment"] == "gaid::-11"


@pytest.mark.parametrize("name", sorted(SHORTCUT_PRESETS))
def test_every_shortcut_is_exposed(client, transport, name):
    getattr(client, name)()

    for key, value in SHORTCUT_PRESETS[name].items():
        assert transport.last.params[key] == value


def test_presets_are_read_only():
    with pytest.raises(TypeError):
        SHORTCUT_PRESETS["keywords"]["sort"] = "ga:visits"
    with pytest.raises(TypeError):
        SHORTCUT_PRESETS["new"] = {}
    assert SHORTCUT_PRESETS["keywords"]["sort"] == "-ga:visits"


def test_unknown_shortcut(client):
    with pytest.raises(ValueError):
        client.run_shortcut("visits_by_planet")


def test_management_endpoints_need_only_token(web_credential, transport):
    client = AnalyticsClient(WebApplicationStrategy(web_credential, transport), transport)
    client.set_access_token("tok")

    client.get_web_properties()
    client.get_profiles()

    assert [call.url for call in transport.calls] == [WEBPROPERTIES_URL, PROFILES_URL]
    assert all(call.params == {"access_token": "tok"} for call in transport.calls)


def test_management_without_token(client, transport):
    client.set_access_token("")
    with pytest.raises(MissingIdentityError):
        client.get_profiles()


def test_decode_default_and_per_call_override(web_credential, transport):
    client = AnalyticsClient(
        WebApplicationStrategy(web_credential, transport),
        transport,
        access_token="tok",
        account_id="ga:1",
        decode=DecodeTarget.OBJECT,
    )
    transport.queue({"kind": "analytics#gaData"}).queue({"kind": "analytics#gaData"})

    assert client.query().data.kind == "analytics#gaData"
    assert client.query(decode=DecodeTarget.MAPPING).data == {"kind": "analytics#gaData"}


def test_strategy_must_implement_contract(client):
    with pytest.raises(TypeError):
        client.strategy = object()


def test_from_settings_picks_flow(transport, p12_file):
    web = AppSettings(_env_file=None, client_id="c", client_secret="s", redirect_uri="https://r")
    service = AppSettings(
        _env_file=None,
        client_id="c",
        service_account_email="e@x.com",
        private_key_path=p12_file,
        account_id="ga:1",
    )

    assert isinstance(AnalyticsClient.from_settings(web, transport).strategy, WebApplicationStrategy)
    built = AnalyticsClient.from_settings(service, transport)
    assert isinstance(built.strategy, ServiceAccountStrategy)
    assert built.identity.account_id == "ga:1"
