"""Pytest configuration and fixtures for citysim tests."""

import os

import pytest

import citysim.events  # noqa: F401 - register all events
from citysim import logging
from citysim.core.registry import clear_registry
from citysim.simulation import Simulation


@pytest.fixture
def clean_registry():
    """
    Save registry state, clear it for the test, then restore it.

    Request this fixture explicitly in tests that define throwaway roles or
    events. DO NOT use autouse=True: integration tests rely on the built-in
    events being registered.
    """
    # noinspection PyProtectedMember
    from citysim.core.registry import _EVENT_REGISTRY, _ROLE_REGISTRY

    saved_roles = dict(_ROLE_REGISTRY)
    saved_events = dict(_EVENT_REGISTRY)

    clear_registry()

    yield

    _ROLE_REGISTRY.clear()
    _ROLE_REGISTRY.update(saved_roles)
    _EVENT_REGISTRY.clear()
    _EVENT_REGISTRY.update(saved_events)


@pytest.fixture
def city() -> Simulation:
    """The reference one-collector city (package defaults)."""
    return Simulation.init(logging={"default_level": "ERROR"})


@pytest.fixture(autouse=True)
def mute_citysim_logs(caplog):
    # DEBUG only on the coverage run so every logging branch executes
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="citysim")
    logging.getLogger("citysim").setLevel(level)
