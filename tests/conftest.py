"""Pytest configuration for tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. The kernel backend
    works in 64-bit floats, so that is the default precision here.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False, random_seed=42)
    yield


@pytest.fixture
def small_scene():
    """A level-3 pyramid scene with the default light."""
    from pyramid_tracer.scene.scene import default_scene

    return default_scene(level=3)


@pytest.fixture
def small_camera():
    """A 32x32 camera at the default eye point."""
    from pyramid_tracer.camera.pinhole import Camera
    from pyramid_tracer.scene.scene import DEFAULT_EYE

    return Camera(DEFAULT_EYE, 32, 32)
