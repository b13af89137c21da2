"""Pytest configuration and shared fixtures for KadNode tests."""

from __future__ import annotations

import logging

import pytest

from kadnode.collaborators import Collaborators
from kadnode.models import FeatureSet, NodeConfig


def pytest_configure(config):
    """Register project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("config", "marks tests as configuration tests"),
        ("cli", "marks tests as CLI tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Drop handlers installed by setup_logging after each test."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture
def features():
    """Feature set with every optional subsystem except service control."""
    return FeatureSet()


@pytest.fixture
def collaborators():
    """Fresh in-memory collaborators."""
    return Collaborators()


@pytest.fixture
def config(features):
    """Empty configuration record."""
    return NodeConfig.create(features)
