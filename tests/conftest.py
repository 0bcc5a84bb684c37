"""Shared pytest fixtures for primed tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from primed.bootstrap import _reset_for_tests
from primed.config.settings import reset_settings
from primed.engine.hydrator import Hydrator, reset_hydrator
from primed.registry.fields import FieldMetadataStore
from primed.registry.types import TypeRegistry

_SETTINGS_ENV = (
    "PRIMED_CYCLE_POLICY",
    "PRIMED_WARN_ON_CYCLE",
    "PRIMED_SEAL_REGISTRY",
    "PRIMED_LOAD_PLUGINS",
    "PRIMED_CONFIGURE_LOGGING",
    "PRIMED_VERBOSE",
    "PRIMED_LOG_JSON",
)


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep every test on code-default settings and a fresh default hydrator.

    ``PRIMED_CONFIG`` points at a file that does not exist, so walk-up
    discovery never picks up a stray ``primed.toml``.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PRIMED_CONFIG", str(tmp_path / "absent-primed.toml"))
    reset_settings()
    reset_hydrator()
    _reset_for_tests()
    yield
    reset_settings()
    reset_hydrator()
    _reset_for_tests()


@pytest.fixture
def registry() -> TypeRegistry:
    """Empty type registry, isolated from the process-wide one."""
    return TypeRegistry()


@pytest.fixture
def fields() -> FieldMetadataStore:
    """Empty field store, isolated from the process-wide one."""
    return FieldMetadataStore()


@pytest.fixture
def hydrator(registry: TypeRegistry, fields: FieldMetadataStore) -> Hydrator:
    """Hydrator over the isolated registry and field store."""
    return Hydrator(registry, fields)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore primed logger state after each test."""
    primed = logging.getLogger("primed")
    original_handlers = primed.handlers[:]
    original_level = primed.level
    original_propagate = primed.propagate
    yield
    primed.handlers = original_handlers
    primed.setLevel(original_level)
    primed.propagate = original_propagate
    structlog.reset_defaults()
