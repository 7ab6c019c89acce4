"""Pytest fixtures for tests."""

import asyncio

import pytest

from promised_models import FieldType, ManualScheduler, Model, create_default_registry


async def _delayed(result: bool, delay: float) -> bool:
    await asyncio.sleep(delay)
    return result


def _parse_int(field, value):
    return int(value)


INTEGER = FieldType(name="integer", default=0, parse=_parse_int)


class Profile(Model):
    """Model used across tests."""

    schema = {
        "name": {"type": "string"},
        "email": {"type": "string", "default": "nobody@example.com"},
        "token": {"type": "string", "internal": True},
    }


@pytest.fixture
def registry():
    """Create a registry with the built-in types plus an integer type."""
    registry = create_default_registry()
    registry.register(INTEGER)
    return registry


@pytest.fixture
def scheduler():
    """Create a scheduler flushed explicitly by the test."""
    return ManualScheduler()


@pytest.fixture
def profile_class():
    """Get the Profile model class."""
    return Profile


@pytest.fixture
def profile(scheduler):
    """Create a Profile driven by the manual scheduler."""
    return Profile({"name": "Ann"}, scheduler=scheduler)


@pytest.fixture
def delayed():
    """Build awaitables resolving to a validation result after a delay."""
    return _delayed
