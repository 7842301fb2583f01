"""Scene module for pyramid construction and the scene container.

Components:
    pyramid: Recursive sphere pyramid builder
    scene: Scene container (light + geometry) and the default scene
"""

from .pyramid import BOUND_SCALE, build_sphere_pyramid, expected_sphere_count
from .scene import (
    DEFAULT_CENTER,
    DEFAULT_EYE,
    DEFAULT_LEVEL,
    DEFAULT_LIGHT,
    DEFAULT_RADIUS,
    Scene,
    default_scene,
)

__all__ = [
    "build_sphere_pyramid",
    "expected_sphere_count",
    "BOUND_SCALE",
    "Scene",
    "default_scene",
    "DEFAULT_LEVEL",
    "DEFAULT_CENTER",
    "DEFAULT_RADIUS",
    "DEFAULT_LIGHT",
    "DEFAULT_EYE",
]
