"""Pytest fixtures for provider-based architecture."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

# Settings are read once and cached; configure before the package is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DOCUMENT_STORE", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SHOULD_INIT", "false")

import pytest

from jobportal.application.bootstrap_service import BootstrapService
from jobportal.core.config import get_settings
from jobportal.domain.value_objects import Actor
from jobportal.infrastructure.persistence.memory_store import InMemoryDocumentStore
from jobportal.infrastructure.providers.service_provider import reset_services
from jobportal.infrastructure.providers.store_provider import reset_document_store
from jobportal.utils.security import get_password_manager, reset_security_managers

INIT_PASSWORD = get_settings().INIT_PASSWORD


@pytest.fixture(autouse=True)
async def reset_provider_state() -> AsyncIterator[None]:
    """Ensure each test starts with clean provider singletons."""
    await reset_services()
    await reset_document_store()
    reset_security_managers()
    yield
    await reset_services()
    await reset_document_store()
    reset_security_managers()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def password_manager():
    return get_password_manager()


@pytest.fixture
async def seeded_store(store, password_manager) -> InMemoryDocumentStore:
    """Store holding the first-boot permissions, roles and users."""
    await BootstrapService(store, password_manager, INIT_PASSWORD).seed()
    return store


@pytest.fixture
def admin_actor() -> Actor:
    return Actor(id="2f1c6d3e-8a44-4c1e-9a3b-7d2a5c9e0b11", email="admin@gmail.com")
