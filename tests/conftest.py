"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture
def sky_environment():
    """A uniform light blue environment map."""
    from tinyraytracer.scene.environment import Environment

    return Environment.from_color((0.2, 0.7, 0.8), width=4, height=2)


@pytest.fixture
def white_environment():
    """A uniform white environment map."""
    from tinyraytracer.scene.environment import Environment

    return Environment.from_color((1.0, 1.0, 1.0))
