"""Shared constants, palette, and configuration for forge_donut."""

import math
import os
from dataclasses import dataclass
from typing import Optional

# ---------------------------------------------------------------------------
# Geometry and sampling
# ---------------------------------------------------------------------------

TUBE_RADIUS = 1.0  # R1
TORUS_RADIUS = 2.0  # R2
CAMERA_DISTANCE = 5.0  # K2
PROJECTION_SCALE = 150.0  # K1

THETA_STEP = 0.07  # Around the tube
PHI_STEP = 0.02  # Around the torus axis

# ---------------------------------------------------------------------------
# Raster
# ---------------------------------------------------------------------------

WIDTH = 320
HEIGHT = 240

LIGHT_DIRECTION = (0.0, 1.0, -1.0)  # Up and toward the viewer
BRIGHTNESS = 1.0

# Per-frame rotation deltas
DELTA_A = 0.01
DELTA_B = 0.03

TAU = 2.0 * math.pi

# Dark-to-light character ramp, 12 levels
ASCII_RAMP = ".,-~:;=!*#$@"

DPI = 200

# ---------------------------------------------------------------------------
# Dark theme style (shared with the matplotlib preview)
# ---------------------------------------------------------------------------

STYLE = {
    "bg": "#1a1a2e",  # Dark blue-gray background
    "grid": "#2a2a4a",  # Subtle grid lines
    "axis": "#8888aa",  # Axis lines and labels
    "text": "#e0e0f0",  # Primary text
    "text_dim": "#8888aa",  # Secondary/dim text
    "accent1": "#4fc3f7",  # Cyan
    "accent2": "#ff7043",  # Orange
    "warn": "#ffd54f",  # Yellow
}


@dataclass(frozen=True)
class TorusConfig:
    """Every constant the renderer reads, defaulting to the 320x240 setup.

    Tests build smaller or coarser configurations from this; the core never
    reaches for the module constants directly.
    """

    tube_radius: float = TUBE_RADIUS
    torus_radius: float = TORUS_RADIUS
    camera_distance: float = CAMERA_DISTANCE
    projection_scale: float = PROJECTION_SCALE
    theta_step: float = THETA_STEP
    phi_step: float = PHI_STEP
    width: int = WIDTH
    height: int = HEIGHT
    center_x: Optional[float] = None
    center_y: Optional[float] = None
    light_direction: tuple = LIGHT_DIRECTION
    brightness: float = BRIGHTNESS
    delta_a: float = DELTA_A
    delta_b: float = DELTA_B

    def __post_init__(self):
        if self.theta_step <= 0 or self.phi_step <= 0:
            raise ValueError(
                f"Sample steps must be positive, got theta={self.theta_step} "
                f"phi={self.phi_step}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Raster size must be positive, got {self.width}x{self.height}"
            )
        if len(self.light_direction) != 3:
            raise ValueError("Light direction must have three components")
        if math.hypot(*self.light_direction) == 0.0:
            raise ValueError("Light direction must be non-zero")
        # Frozen: defaults for the projection center go through object.__setattr__
        if self.center_x is None:
            object.__setattr__(self, "center_x", self.width / 2)
        if self.center_y is None:
            object.__setattr__(self, "center_y", self.height / 2)

    @property
    def shape(self):
        """(rows, cols) of the frame buffer."""
        return (self.height, self.width)

    @property
    def light_unit(self):
        """Light direction normalised to unit length."""
        length = math.hypot(*self.light_direction)
        return tuple(c / length for c in self.light_direction)


DEFAULT_CONFIG = TorusConfig()


def relpath(path):
    """Path relative to the working directory, for progress output."""
    try:
        return os.path.relpath(path)
    except ValueError:
        # Different drive on Windows
        return path
