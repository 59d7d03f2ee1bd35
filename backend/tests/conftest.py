import sys
import os

import pytest

# project root = repository root (parent of backend/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
BACKEND_ROOT = os.path.join(PROJECT_ROOT, "backend")

# Add PROJECT_ROOT and BACKEND_ROOT to sys.path
for path in [PROJECT_ROOT, BACKEND_ROOT]:
    if path not in sys.path:
        sys.path.insert(0, path)


@pytest.fixture
def isolated_registry(tmp_path, monkeypatch):
    """Point the global dataset registry at a throwaway file."""
    from backend.analystpro.services import registry as registry_module

    reg = registry_module.Registry(str(tmp_path / "registry.json"))
    monkeypatch.setattr(registry_module, "registry", reg)
    return reg
