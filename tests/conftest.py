"""
Pytest configuration for postpone tests.

Configures pytest-asyncio markers, silences the package logger below
ERROR and provides component tree fixtures.
"""

import pytest

from postpone import Component, ReadinessGate
from postpone.logging import LoggingConfig


class PostponableComponent(Component):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.postponement = ReadinessGate(name=name)


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )

    LoggingConfig().update(log_level="error")


@pytest.fixture
def postponable():
    def create_postponable(name: str) -> PostponableComponent:
        return PostponableComponent(name)

    return create_postponable


@pytest.fixture
def component():
    def create_component(name: str) -> Component:
        return Component(name)

    return create_component
