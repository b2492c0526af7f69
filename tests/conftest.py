"""Shared fixtures: an in-memory backend served through httpx.MockTransport."""

import json

import httpx
import pytest
import pytest_asyncio

from appconsole import AsyncAdminConsole, MemorySessionStore

TOKEN = "test-token"


def envelope(data=None, message="success", code=200, status=200):
    body = {"code": code, "message": message}
    if data is not None:
        body["data"] = data
    return httpx.Response(status, json=body)


class FakeBackend:
    """Just enough of /api/v1 for the console."""

    def __init__(self):
        self.initialized = True
        self.init_status_error = False
        self.registered = []
        self.requests: list[httpx.Request] = []
        self.apps = {
            1: {
                "id": 1, "name": "demo", "description": "Demo app", "latestVersion": "1.2.0",
                "status": "active", "apiKey": "key-1", "createdAt": "2024-01-01T00:00:00Z",
                "updatedAt": "2024-02-01T00:00:00Z",
            },
        }
        self.versions = {
            1: [
                {"id": 2, "appId": 1, "version": "1.2.0", "changelogMd": "## Features\n- login page\n- dark mode",
                 "changelogHtml": "", "createdAt": "2024-02-01T00:00:00Z"},
                {"id": 1, "appId": 1, "version": "1.1.0", "changelogMd": "## Features\n- login form",
                 "changelogHtml": "", "createdAt": "2024-01-01T00:00:00Z"},
            ],
        }
        self.levels = [
            {"id": 1, "appId": 1, "name": "Free", "level": 1, "permissions": "{}"},
        ]

    def paths(self, method=None):
        return [r.url.path for r in self.requests if method is None or r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        method = request.method

        if path == "/system/init-status":
            if self.init_status_error:
                return httpx.Response(500, text="boom")
            return envelope({"initialized": self.initialized})
        if path == "/system/init" and method == "POST":
            self.initialized = True
            return envelope({"id": 1, "username": json.loads(request.content)["username"]})
        if path == "/auth/register" and method == "POST":
            body = json.loads(request.content)
            if body["username"] == "admin":
                return httpx.Response(400, json={"code": 400, "message": "username already exists"})
            self.registered.append(body["username"])
            return envelope({"id": 2, "username": body["username"]})
        if path == "/auth/login":
            body = json.loads(request.content)
            if body.get("password") != "secret":
                return httpx.Response(401, json={"code": 401, "message": "login failed", "error": "bad credentials"})
            return envelope({"token": TOKEN, "user": {"id": 1, "username": body["username"]}})

        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"code": 401, "message": "unauthorized"})

        if path == "/apps" and method == "GET":
            return envelope(list(self.apps.values()))
        if path == "/apps" and method == "POST":
            body = json.loads(request.content)
            app_id = max(self.apps) + 1
            self.apps[app_id] = {"id": app_id, "name": body["name"], "description": body.get("description", ""),
                                 "latestVersion": "", "status": "active", "apiKey": f"key-{app_id}"}
            return envelope(self.apps[app_id])
        if path.startswith("/apps/"):
            parts = path.split("/")
            app_id = int(parts[2])
            if app_id not in self.apps:
                return httpx.Response(404, json={"code": 404, "message": "not found"})
            if len(parts) == 3 and method == "GET":
                return envelope(self.apps[app_id])
            if len(parts) == 3 and method == "DELETE":
                del self.apps[app_id]
                return envelope({"deletedId": app_id})
            if parts[3] == "versions" and method == "GET":
                return envelope(self.versions.get(app_id, []))
            if parts[3] == "versions" and method == "POST":
                body = json.loads(request.content)
                record = {"id": 99, "appId": app_id, "version": body["version"],
                          "changelogMd": body["changelogMd"], "changelogHtml": "", "createdAt": "2024-03-01T00:00:00Z"}
                self.versions.setdefault(app_id, []).insert(0, record)
                self.apps[app_id]["latestVersion"] = body["version"]
                return envelope(record)
        if path == "/member/levels" and method == "GET":
            return envelope({"levels": self.levels})
        if path == "/member/levels" and method == "PUT":
            self.levels = json.loads(request.content)["levels"]
            return envelope(self.levels)
        if path == "/system/audit-logs":
            return envelope([{"id": 1, "userId": "1", "userName": "admin", "action": "create",
                              "entityType": "app", "entityName": "demo", "ipAddress": "127.0.0.1",
                              "status": "success", "createdAt": "2024-01-01T00:00:00Z"}])
        if path == "/system/performance/stats":
            return envelope({"totalRequests": 10, "averageResponseTime": 12.5})
        if path == "/system/performance/reset":
            return envelope(message="reset")
        if path == "/system/cache/stats":
            return envelope({"totalKeys": 3})
        if path == "/system/cache/clear":
            return envelope(message="cleared")
        return httpx.Response(404, json={"code": 404, "message": f"no route {method} {path}"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store():
    return MemorySessionStore(TOKEN)


@pytest_asyncio.fixture
async def client(backend, store):
    c = AsyncAdminConsole(base_url="http://test", session_store=store, transport=httpx.MockTransport(backend.handler))
    yield c
    await c.close()
