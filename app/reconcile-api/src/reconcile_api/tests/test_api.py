"""Unit tests for the API.

These tests use FastAPI's TestClient against small directory trees written
to ``tmp_path``, and override the registry dependency so every test starts
from scope 0.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tree_reconciler.components import ScopeRegistry, create_node

from reconcile_api.config import Settings
from reconcile_api.dependencies import get_scope_registry, get_settings
from reconcile_api.main import app

client = TestClient(app)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _write(root: Path, files: dict[str, str]) -> Path:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def registry():
    """Provide a private ScopeRegistry via dependency override."""
    registry = ScopeRegistry()
    app.dependency_overrides[get_scope_registry] = lambda: registry
    yield registry
    app.dependency_overrides.clear()


@pytest.fixture()
def game(tmp_path: Path) -> Path:
    return _write(tmp_path / "Game", {
        "Server/init.server.lua": "print('boot')",
        "Server/Helper.lua": "return {}",
        "Config/init.meta.json": '{"kind": "Model", "properties": {"Size": 3}}',
        "Readme.txt": "hi",
    })


# ── Root ──────────────────────────────────────────────────────────────────────

def test_root() -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Tree Reconciler API"


# ── Health ────────────────────────────────────────────────────────────────────

def test_health(registry: ScopeRegistry) -> None:
    registry.allocate_scope()
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "current_scope": 1, "environments": 0}


# ── Reconcile ─────────────────────────────────────────────────────────────────

def test_reconcile_allocates_scope(registry: ScopeRegistry, game: Path) -> None:
    response = client.post("/api/v1/reconcile", json={"directory": str(game)})
    assert response.status_code == 200
    data = response.json()
    assert data["scope"] == 1
    assert registry.current_scope == 1

    tree = data["tree"]
    assert tree["kind"] == "Folder"
    assert tree["name"] == "Game"
    children = {c["name"]: c for c in tree["children"]}
    assert set(children) == {"Server", "Config", "Readme"}
    assert children["Server"]["kind"] == "Script"
    assert [c["name"] for c in children["Server"]["children"]] == ["Helper"]
    assert children["Config"]["properties"]["Size"] == 3


def test_reconcile_with_explicit_scope(registry: ScopeRegistry, game: Path) -> None:
    response = client.post("/api/v1/reconcile", json={"directory": str(game), "scope": 5})
    assert response.status_code == 200
    assert response.json()["scope"] == 5
    assert registry.current_scope == 0


def test_reconcile_missing_directory(registry: ScopeRegistry, tmp_path: Path) -> None:
    response = client.post("/api/v1/reconcile", json={"directory": str(tmp_path / "nope")})
    assert response.status_code == 404


def test_reconcile_bad_metadata(registry: ScopeRegistry, tmp_path: Path) -> None:
    root = _write(tmp_path / "Root", {"Bad/init.meta.json": "{oops"})
    response = client.post("/api/v1/reconcile", json={"directory": str(root)})
    assert response.status_code == 422
    assert "Invalid JSON" in response.json()["detail"]


def test_reconcile_metadata_not_utf8(registry: ScopeRegistry, tmp_path: Path) -> None:
    root = tmp_path / "Root"
    (root / "Bad").mkdir(parents=True)
    (root / "Bad" / "init.meta.json").write_bytes(b'{"kind": "\xff"}')
    response = client.post("/api/v1/reconcile", json={"directory": str(root)})
    assert response.status_code == 422
    assert "UTF-8" in response.json()["detail"]


def test_reconcile_unknown_kind(registry: ScopeRegistry, tmp_path: Path) -> None:
    root = _write(tmp_path / "Root", {"init.meta.json": '{"kind": "Spaceship"}'})
    response = client.post("/api/v1/reconcile", json={"directory": str(root)})
    assert response.status_code == 422


def test_reconcile_outside_allowed_root(registry: ScopeRegistry, game: Path, tmp_path: Path) -> None:
    allowed = tmp_path / "elsewhere"
    allowed.mkdir()
    app.dependency_overrides[get_settings] = lambda: Settings(allowed_root=allowed)
    response = client.post("/api/v1/reconcile", json={"directory": str(game)})
    assert response.status_code == 403


def test_reconcile_inside_allowed_root(registry: ScopeRegistry, game: Path) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(allowed_root=game.parent)
    response = client.post("/api/v1/reconcile", json={"directory": str(game)})
    assert response.status_code == 200


def test_reconcile_symlinked_root_keeps_link_name(registry: ScopeRegistry, game: Path, tmp_path: Path) -> None:
    alias = tmp_path / "Alias"
    try:
        alias.symlink_to(game, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")
    response = client.post("/api/v1/reconcile", json={"directory": str(alias)})
    assert response.status_code == 200
    assert response.json()["tree"]["name"] == "Alias"


def test_reconcile_symlink_escaping_allowed_root(registry: ScopeRegistry, game: Path, tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    escape = allowed / "Escape"
    try:
        escape.symlink_to(game, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")
    app.dependency_overrides[get_settings] = lambda: Settings(allowed_root=allowed)
    response = client.post("/api/v1/reconcile", json={"directory": str(escape)})
    assert response.status_code == 403


def test_reconcile_rejects_non_positive_scope(registry: ScopeRegistry, game: Path) -> None:
    response = client.post("/api/v1/reconcile", json={"directory": str(game), "scope": 0})
    assert response.status_code == 422


# ── Scopes ────────────────────────────────────────────────────────────────────

def test_create_scope(registry: ScopeRegistry) -> None:
    first = client.post("/api/v1/scopes")
    second = client.post("/api/v1/scopes")
    assert first.status_code == 201
    assert (first.json()["scope"], second.json()["scope"]) == (1, 2)


def test_list_scopes(registry: ScopeRegistry) -> None:
    script = create_node("Script", {"Name": "Main"})
    script.environment_key = "1:/game/Main.server.lua"
    registry.allocate_scope()
    registry.open_environment(script)

    response = client.get("/api/v1/scopes")
    assert response.status_code == 200
    assert response.json() == {
        "current_scope": 1,
        "environments": ["1:/game/Main.server.lua"],
    }


# ── Settings ──────────────────────────────────────────────────────────────────

def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RECONCILE_API_API_PORT", "9123")
    monkeypatch.setenv("RECONCILE_API_ALLOWED_ROOT", str(tmp_path))
    monkeypatch.setenv("TREE_RECONCILER_API_PORT", "1")
    loaded = Settings(_env_file=None)
    assert loaded.api_port == 9123
    assert loaded.allowed_root == tmp_path
