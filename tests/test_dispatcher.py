import logging

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from login_gate.main import create_app
from login_gate.middleware import raw_request_path
from login_gate.service.settings_store import GateSettings, SettingsStore


def test_legacy_endpoint_is_redirected(client, login_flow):
    r = client.get("/wp-login.php", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"] == "/404"
    assert login_flow.calls == []


def test_legacy_endpoint_with_query_is_redirected(client):
    r = client.get("/wp-login.php?action=lostpassword&x=1", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"] == "/404"


def test_legacy_endpoint_redirects_to_site_root_without_block_path(login_flow):
    store = SettingsStore(GateSettings(hidden_login_path="secret"))
    client = TestClient(create_app(settings=store, login_flow=login_flow))
    r = client.get("/WP-LOGIN.PHP", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"] == "/"


@pytest.mark.parametrize("path", ["/secret", "/secret/", "/secret?redirect_to=/dash"])
def test_hidden_path_runs_login_flow_once(client, login_flow, path):
    r = client.get(path, follow_redirects=False)
    assert r.status_code == 200
    assert r.text == "login form"
    assert len(login_flow.calls) == 1


def test_post_to_legacy_endpoint_reaches_routing(client, login_flow):
    r = client.post("/wp-login.php", data={"log": "a", "pwd": "b"}, follow_redirects=False)
    assert r.status_code != 302
    assert "location" not in r.headers
    assert login_flow.calls == []


def test_post_to_hidden_path_is_not_intercepted(client, login_flow):
    r = client.post("/secret", follow_redirects=False)
    assert r.status_code == 404
    assert login_flow.calls == []


def test_unrelated_paths_reach_routing(client, login_flow):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "gate_enabled": True}
    assert client.get("/nope").status_code == 404
    assert login_flow.calls == []


def test_disabled_gate_lets_everything_through(login_flow):
    client = TestClient(create_app(settings=SettingsStore(GateSettings()), login_flow=login_flow))
    assert client.get("/wp-login.php", follow_redirects=False).status_code == 404
    assert client.get("/secret", follow_redirects=False).status_code == 404
    assert client.get("/health").json() == {"ok": True, "gate_enabled": False}
    assert login_flow.calls == []


def test_settings_changes_apply_to_next_request(client, store, login_flow):
    assert client.get("/secret").status_code == 200
    store.update(hidden_login_path="moved")
    assert client.get("/secret").status_code == 404
    assert client.get("/moved/").status_code == 200
    store.update(hidden_login_path="")
    assert client.get("/wp-login.php", follow_redirects=False).status_code == 404


def test_admin_prefix_bypasses_the_gate(client, login_flow):
    # Admin API disabled (no ADMIN_TOKEN): routing answers, not the gate.
    r = client.get("/admin/login-gate/wp-login.php", follow_redirects=False)
    assert r.status_code == 404
    assert client.get("/admin/login-gate/settings").status_code == 404
    assert login_flow.calls == []


@pytest.mark.parametrize("path", ["/secret%3Fx", "/secret%23x", "/secret%3F", "/secret%2F"])
def test_encoded_separators_do_not_reach_login_flow(client, login_flow, path):
    r = client.get(path, follow_redirects=False)
    assert r.status_code == 404
    assert login_flow.calls == []


def test_login_flow_errors_propagate(store):
    async def broken_flow(request):
        raise RuntimeError("auth backend down")

    client = TestClient(create_app(settings=store, login_flow=broken_flow))
    with pytest.raises(RuntimeError, match="auth backend down"):
        client.get("/secret")


def test_default_login_flow_renders_form(store):
    client = TestClient(create_app(settings=store))
    r = client.get("/secret?redirect_to=%22%3E%3Cscript%3E")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert r.headers["cache-control"] == "no-store"
    assert 'action="/wp-login.php"' in r.text
    assert "<script>" not in r.text


def test_request_id_is_attached(client):
    r = client.get("/wp-login.php", headers={"X-Request-ID": "abc"}, follow_redirects=False)
    assert r.headers["X-Request-ID"] == "abc"


def test_decisions_are_logged_at_debug(client, caplog):
    caplog.set_level(logging.DEBUG, logger="login_gate.middleware.gate")
    client.get("/wp-login.php", follow_redirects=False)
    client.get("/secret")
    events = [getattr(rec, "event", None) for rec in caplog.records]
    assert "gate_redirect" in events
    assert "gate_allow" in events


def test_raw_request_path_keeps_query():
    def make(path, query):
        scope = {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": query,
            "headers": [(b"host", b"testserver")],
            "scheme": "http",
            "server": ("testserver", 80),
        }
        return Request(scope)

    assert raw_request_path(make("/wp-login.php", b"x=1")) == "/wp-login.php?x=1"
    assert raw_request_path(make("/secret/", b"")) == "/secret/"


def test_raw_request_path_is_not_decoded():
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/secret?x",
        "raw_path": b"/secret%3Fx",
        "query_string": b"a=%23b",
        "headers": [(b"host", b"testserver")],
        "scheme": "http",
        "server": ("testserver", 80),
    }
    assert raw_request_path(Request(scope)) == "/secret%3Fx?a=%23b"
