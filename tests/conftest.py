# tests/conftest.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for Vigil LTL monitoring tests.

The configuration handles:
- Python path setup for module imports
- A fresh registry per test, with extraction cells over dict states
- A proposition resolver for parsed formulas over Snapshot states
"""

import sys
import pytest
from pathlib import Path

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Skip the session if the project packages cannot be imported."""
    try:
        import ltl
        import parser
        import runtime
        import utils
    except ImportError as e:
        pytest.skip(f"Cannot import required modules: {e}")

    yield


@pytest.fixture
def registry():
    """Fresh registry with the default 1ms tick."""
    from runtime import Registry

    return Registry()


@pytest.fixture
def count(registry):
    """Cell reading state['count'] from the registry fixture."""
    from runtime import extract

    return extract(registry, lambda state: state["count"], "count")


@pytest.fixture
def flag(registry):
    """Cell reading state['flag'] from the registry fixture."""
    from runtime import extract

    return extract(registry, lambda state: state["flag"], "flag")


@pytest.fixture
def resolve(registry):
    """Identifier resolver producing proposition predicates over Snapshots."""
    from model import proposition_resolver

    return proposition_resolver(registry)


@pytest.fixture
def snapshots():
    """Factory building Snapshots from comma-separated proposition strings."""
    from model import Snapshot

    def build(*props_per_state, times=None):
        result = []
        for i, props in enumerate(props_per_state):
            names = frozenset(p.strip() for p in props.split(",") if p.strip())
            millis = None if times is None else times[i]
            result.append(Snapshot(f"s{i}", names, millis))
        return result

    return build
