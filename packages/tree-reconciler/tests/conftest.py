import pytest

from tree_reconciler.components.scope import reset_registry


@pytest.fixture(autouse=True)
def fresh_registry():
    """Give every test its own process registry."""
    reset_registry()
    yield
    reset_registry()
