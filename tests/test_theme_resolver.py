import logging

import pytest
import requests

from sections.results import Theme
from sections.theme_resolver import THEMES_QUERY, resolve_main_theme, select_main_theme

from .fakes import FakeResponse, themes_payload


def test_returns_the_single_main_theme(make_admin):
    admin = make_admin(themes_payload(
        {"id": "gid://shopify/OnlineStoreTheme/1", "name": "Dawn", "role": "unpublished"},
        {"id": "gid://shopify/OnlineStoreTheme/2", "name": "Sense", "role": "main"},
    ))

    theme = resolve_main_theme(admin)

    assert theme == Theme(id="gid://shopify/OnlineStoreTheme/2", name="Sense", role="main")


def test_queries_only_the_first_page_of_ten(make_admin):
    admin = make_admin(themes_payload())

    resolve_main_theme(admin)

    assert admin.client.calls == [{"query": THEMES_QUERY, "variables": None}]
    assert "themes(first: 10)" in THEMES_QUERY


def test_first_main_theme_in_server_order_wins():
    payload = themes_payload(
        {"id": "T1", "name": "A", "role": "main"},
        {"id": "T2", "name": "B", "role": "main"},
    )
    assert select_main_theme(payload).id == "T1"


def test_role_match_is_case_sensitive():
    payload = themes_payload({"id": "T1", "name": "A", "role": "MAIN"})

    assert select_main_theme(payload) is None
    assert select_main_theme(payload, role="MAIN").id == "T1"


def test_configured_role_is_used(make_admin, settings):
    settings.SHOPIFY_MAIN_THEME_ROLE = "MAIN"
    admin = make_admin(themes_payload({"id": "T9", "name": "Horizon", "role": "MAIN"}))

    assert resolve_main_theme(admin).id == "T9"


def test_main_theme_as_tenth_entry_is_found():
    nodes = [{"id": f"T{i}", "name": f"Theme {i}", "role": "unpublished"} for i in range(9)]
    nodes.append({"id": "T9", "name": "Live", "role": "main"})

    assert select_main_theme(themes_payload(*nodes)).id == "T9"


def test_main_theme_beyond_first_ten_is_not_found():
    nodes = [{"id": f"T{i}", "name": f"Theme {i}", "role": "unpublished"} for i in range(10)]
    nodes.append({"id": "T10", "name": "Live", "role": "main"})

    assert select_main_theme(themes_payload(*nodes)) is None


@pytest.mark.parametrize("payload", [
    themes_payload(),
    themes_payload({"id": "T1", "name": "A", "role": "unpublished"}),
    {"data": {"themes": None}},
    {"data": None, "errors": [{"message": "Access denied for themes field."}]},
    {},
    None,
])
def test_no_main_theme_resolves_to_none(make_admin, payload):
    assert resolve_main_theme(make_admin(payload)) is None


def test_transport_errors_resolve_to_none(make_admin):
    admin = make_admin(requests.ConnectionError("connection reset"))

    assert resolve_main_theme(admin) is None


def test_unparseable_body_resolves_to_none(make_admin):
    admin = make_admin(FakeResponse(ValueError("Expecting value")))

    assert resolve_main_theme(admin) is None


def test_malformed_edges_resolve_to_none(make_admin):
    admin = make_admin({"data": {"themes": {"edges": [{"cursor": "abc"}]}}})

    assert resolve_main_theme(admin) is None


def test_raw_response_is_logged(make_admin, caplog):
    caplog.set_level(logging.DEBUG, logger="sections")
    admin = make_admin(themes_payload({"id": "T1", "name": "A", "role": "main"}))

    resolve_main_theme(admin)

    assert any("Themes query response" in record.getMessage() for record in caplog.records)
