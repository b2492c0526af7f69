"""REST wrappers against the in-memory backend."""

import json

import httpx
import pytest

from appconsole import AsyncAdminConsole, MemorySessionStore, SessionState
from appconsole.errors import (
    AuthError,
    ChangelogError,
    ConnectionError,
    ConsoleError,
    DowngradeRejected,
    EqualRejected,
    InvalidFormat,
    ValidationError,
)
from appconsole.members import default_permissions, normalize_levels
from appconsole.transport.http import HttpClient

from conftest import TOKEN


@pytest.mark.asyncio
async def test_envelope_is_unwrapped_and_token_sent(client, backend):
    apps = await client.apps.list()
    assert [a.name for a in apps] == ["demo"]
    assert apps[0].latest_version == "1.2.0"
    assert backend.requests[-1].headers["Authorization"] == f"Bearer {TOKEN}"
    assert backend.requests[-1].url.path == "/api/v1/apps"


def test_cached_payload_is_decoded():
    cached = {"code": 200, "message": "success (from cache)", "data": '[{"id": 1}]'}
    assert HttpClient._unwrap(cached) == [{"id": 1}]
    assert HttpClient._unwrap({"code": 200, "message": "ok", "data": "plain"}) == "plain"
    assert HttpClient._unwrap([1, 2]) == [1, 2]


@pytest.mark.asyncio
async def test_unauthorized_clears_token(client, store):
    store.set_token("stale")
    with pytest.raises(AuthError) as exc:
        await client.apps.list()
    assert exc.value.code == "unauthorized"
    assert not store.has_valid_token()


@pytest.mark.asyncio
async def test_http_errors_raise_console_error(client):
    with pytest.raises(ConsoleError) as exc:
        await client.apps.get(404)
    assert exc.value.code == "http_error"
    assert exc.value.details == {"status": 404}


@pytest.mark.asyncio
async def test_transport_failure_raises_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with AsyncAdminConsole(base_url="http://test", transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(ConnectionError):
            await c.system.get_init_status()


@pytest.mark.asyncio
async def test_login_stores_token(backend):
    store = MemorySessionStore()
    async with AsyncAdminConsole(base_url="http://test", session_store=store,
                                 transport=httpx.MockTransport(backend.handler)) as c:
        assert not c.auth.is_authenticated()
        result = await c.auth.login("admin", "secret")
        assert result["user"]["username"] == "admin"
        assert store.get_token() == TOKEN
        assert await c.session_state() is SessionState.READY
        c.auth.logout()
        assert await c.session_state() is SessionState.NEEDS_LOGIN


@pytest.mark.asyncio
async def test_login_failure(backend):
    store = MemorySessionStore()
    async with AsyncAdminConsole(base_url="http://test", session_store=store,
                                 transport=httpx.MockTransport(backend.handler)) as c:
        with pytest.raises(AuthError):
            await c.auth.login("admin", "wrong")
    assert not store.has_valid_token()


@pytest.mark.asyncio
async def test_init_status_is_unauthenticated(client, backend):
    backend.initialized = False
    status = await client.system.get_init_status()
    assert status.initialized is False
    assert "Authorization" not in backend.requests[-1].headers


@pytest.mark.asyncio
async def test_init_admin_validates_before_sending(client, backend):
    with pytest.raises(ValidationError) as exc:
        await client.system.init_admin("ad", "admin@example.com", "secret1")
    assert exc.value.field == "username"
    with pytest.raises(ValidationError) as exc:
        await client.system.init_admin("admin", "not-an-email", "secret1")
    assert exc.value.field == "email"
    with pytest.raises(ValidationError) as exc:
        await client.system.init_admin("admin", "admin@example.com", "12345")
    assert exc.value.field == "password"
    with pytest.raises(ValidationError) as exc:
        await client.system.init_admin("admin", "admin@example.com", "secret1", confirm_password="secret2")
    assert exc.value.field == "confirmPassword"
    assert "/api/v1/system/init" not in backend.paths()

    backend.initialized = False
    await client.system.init_admin("admin", "admin@example.com", "secret1")
    assert backend.initialized


@pytest.mark.asyncio
async def test_release_upgrade_is_posted(client, backend):
    published = await client.apps.release(1, "1.3.0", "## Fixes\n- crash")
    assert published.version == "1.3.0"
    post = [r for r in backend.requests if r.method == "POST"][-1]
    assert post.url.path == "/api/v1/apps/1/versions"
    assert json.loads(post.content) == {"version": "1.3.0", "changelogMd": "## Fixes\n- crash"}
    assert (await client.apps.get(1)).latest_version == "1.3.0"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "version, error",
    [("1.2.0", EqualRejected), ("1.1.9", DowngradeRejected), ("1.3", InvalidFormat)],
)
async def test_release_rejections_never_reach_backend(client, backend, version, error):
    with pytest.raises(error):
        await client.apps.release(1, version, "- notes")
    assert backend.paths("POST") == []


@pytest.mark.asyncio
async def test_release_requires_changelog(client, backend):
    with pytest.raises(ChangelogError):
        await client.apps.release(1, "2.0.0", "  ")
    assert backend.paths("POST") == []


@pytest.mark.asyncio
async def test_first_release_uses_initial_baseline(client, backend):
    app = await client.apps.create("new-app", "fresh")
    assert app.latest_version == ""
    published = await client.apps.release(app.id, "0.1.0", "- first")
    assert published.version == "0.1.0"


@pytest.mark.asyncio
async def test_create_app_validation(client, backend):
    for name in ["a", "x" * 21, "bad name!"]:
        with pytest.raises(ValidationError):
            await client.apps.create(name)
    with pytest.raises(ValidationError):
        await client.apps.create("ok-name", "d" * 201)
    assert backend.paths("POST") == []


@pytest.mark.asyncio
async def test_versions_and_delete(client, backend):
    versions = await client.apps.versions(1)
    assert [v.version for v in versions] == ["1.2.0", "1.1.0"]
    assert versions[0].app_id == 1
    await client.apps.delete(1)
    assert await client.apps.list() == []


def test_normalize_levels_renumbers_and_checks_json():
    levels = normalize_levels([
        {"name": "Pro", "level": 5, "permissions": default_permissions()},
        {"name": "Free", "level": 9, "permissions": "{}"},
    ])
    assert [(lv.name, lv.level) for lv in levels] == [("Pro", 1), ("Free", 2)]

    with pytest.raises(ValidationError):
        normalize_levels([{"name": "Bad", "level": 1, "permissions": "{oops"}])
    with pytest.raises(ValidationError):
        normalize_levels([{"name": "List", "level": 1, "permissions": "[]"}])


@pytest.mark.asyncio
async def test_member_levels_roundtrip(client, backend):
    levels = await client.members.levels()
    assert [lv.name for lv in levels] == ["Free"]
    saved = await client.members.update_levels(
        levels + [{"name": "Gold", "level": 7, "permissions": '{"features": ["all"]}'}]
    )
    assert [(lv.name, lv.level) for lv in saved] == [("Free", 1), ("Gold", 2)]


@pytest.mark.asyncio
async def test_telemetry(client):
    entries = await client.system.audit_logs()
    assert entries[0].actor == "admin"
    assert entries[0].target == "app demo"
    perf = await client.system.performance_stats()
    assert perf.total_requests == 10
    cache = await client.system.cache_stats()
    assert cache.total_keys == 3
    await client.system.reset_performance_stats()
    await client.system.clear_cache()


@pytest.mark.asyncio
async def test_non_json_response_raises_console_error():
    frontend = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>frontend</html>"))
    async with AsyncAdminConsole(base_url="http://test", session_store=MemorySessionStore(TOKEN),
                                 transport=frontend) as c:
        with pytest.raises(ConsoleError) as exc:
            await c.apps.list()
    assert exc.value.code == "invalid_response"
    assert isinstance(exc.value.__cause__, ValueError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"code": 200, "message": "ok", "data": [{"id": "not-a-number"}]},
        {"code": 200, "message": "ok", "data": {"apps": []}},
        {"code": 200, "message": "ok", "data": 5},
    ],
)
async def test_malformed_payload_raises_console_error(payload):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
    async with AsyncAdminConsole(base_url="http://test", session_store=MemorySessionStore(TOKEN),
                                 transport=transport) as c:
        with pytest.raises(ConsoleError) as exc:
            await c.apps.list()
        assert exc.value.code == "invalid_response"
        with pytest.raises(ConsoleError):
            await c.apps.versions(1)


def test_normalize_levels_rejects_malformed_entries():
    with pytest.raises(ValidationError) as exc:
        normalize_levels([{"level": "high", "permissions": "{}"}])
    assert exc.value.field == "levels"


@pytest.mark.asyncio
async def test_register(client, backend):
    result = await client.auth.register("newbie", "newbie@example.com", "secret1")
    assert result["username"] == "newbie"
    assert backend.registered == ["newbie"]
    assert "Authorization" not in backend.requests[-1].headers

    with pytest.raises(AuthError) as exc:
        await client.auth.register("admin", "admin@example.com", "secret1")
    assert "Registration failed" in str(exc.value)
    assert isinstance(exc.value.__cause__, ConsoleError)
