"""Tests for the process-wide scope registry."""

import importlib
import threading

import pytest

from tree_reconciler.components import create_node, scope as scope_module
from tree_reconciler.components.scope import (
    environment_key,
    get_registry,
    reset_registry,
)


def _script(key: str | None = "1:/game/Main.server.lua"):
    node = create_node("Script", {"Name": "Main"})
    node.environment_key = key
    return node


class TestSingleton:
    def test_first_access_creates_empty_registry(self):
        registry = get_registry()
        assert registry.current_scope == 0
        assert registry.environments == {}

    def test_same_instance_on_every_access(self):
        assert get_registry() is get_registry()

    def test_later_access_keeps_state(self):
        registry = get_registry()
        registry.allocate_scope()
        registry.open_environment(_script())
        again = get_registry()
        assert again.current_scope == 1
        assert list(again.environments) == ["1:/game/Main.server.lua"]

    def test_survives_module_reload(self):
        registry = get_registry()
        registry.allocate_scope()
        reloaded = importlib.reload(scope_module)
        assert reloaded.get_registry() is registry
        assert reloaded.get_registry().current_scope == 1

    def test_reset_hook_drops_instance(self):
        registry = get_registry()
        reset_registry()
        assert get_registry() is not registry

    def test_concurrent_first_access_creates_one_instance(self):
        seen = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            seen.append(get_registry())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(r) for r in seen}) == 1


class TestScopes:
    def test_scopes_are_monotonic_and_unique(self):
        registry = get_registry()
        ids = [registry.allocate_scope() for _ in range(5)]
        assert ids == [1, 2, 3, 4, 5]
        assert registry.current_scope == 5

    def test_concurrent_allocation_never_repeats(self):
        registry = get_registry()
        barrier = threading.Barrier(8)
        results: list[list[int]] = []

        def worker():
            ids = []
            barrier.wait()
            for _ in range(500):
                ids.append(registry.allocate_scope())
            results.append(ids)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        allocated = [scope for ids in results for scope in ids]
        assert len(allocated) == 4000
        assert len(set(allocated)) == 4000
        assert registry.current_scope == 4000

    def test_environment_key(self):
        assert environment_key(4, "/game/Main.server.lua") == "4:/game/Main.server.lua"


class TestEnvironments:
    def test_open_creates_once(self):
        registry = get_registry()
        node = _script()
        env = registry.open_environment(node)
        assert env.scope == 1
        assert env.script_name == "Main"
        assert env.script_kind == "Script"
        env.variables["counter"] = 1
        assert registry.open_environment(node) is env
        assert registry.open_environment(node).variables == {"counter": 1}

    def test_keys_are_scoped(self):
        registry = get_registry()
        registry.open_environment(_script("1:/game/Main.server.lua"))
        registry.open_environment(_script("2:/game/Main.server.lua"))
        assert len(registry.environments) == 2

    def test_non_script_rejected(self):
        with pytest.raises(ValueError):
            get_registry().open_environment(create_node("Folder"))

    def test_script_without_key_rejected(self):
        with pytest.raises(ValueError):
            get_registry().open_environment(_script(None))
