"""Torus geometry, rotation, perspective projection, and shading.

The torus is a circle of radius R1 in the xy-plane, centred at (R2, 0, 0),
swept around the y axis by phi.  The swept surface is then rotated about the
x axis by A and about the z axis by B.  Everything is evaluated over the full
theta x phi grid at once: theta runs down the rows, phi across the columns.

    circle   = (R2 + R1 cos(theta), R1 sin(theta), 0)
    normal   = (cos(theta), sin(theta), 0)
    ooz      = 1 / (z + K2)
    screen_x = center_x + K1 * ooz * x
    screen_y = center_y - K1 * ooz * y      (raster y grows downward)
"""

from typing import NamedTuple

import numpy as np

from ._common import DEFAULT_CONFIG, TAU


class Samples(NamedTuple):
    """Projected torus samples, each an array shaped (len(theta), len(phi))."""

    screen_x: np.ndarray
    screen_y: np.ndarray
    ooz: np.ndarray
    luminance: np.ndarray


def theta_grid(config=DEFAULT_CONFIG):
    """Tube angles over [0, 2pi)."""
    return np.arange(0.0, TAU, config.theta_step)


def phi_grid(config=DEFAULT_CONFIG):
    """Revolution angles over [0, 2pi)."""
    return np.arange(0.0, TAU, config.phi_step)


def rotate(cx, cy, cos_phi, sin_phi, state):
    """Sweep the circle point (cx, cy, 0) by phi, then rotate by A and B.

    Works on scalars or broadcastable arrays.  The same transform applies to
    the surface normal, since it has no translation in it once (cx, cy) is
    given.
    """
    cos_a, sin_a = np.cos(state.angle_a), np.sin(state.angle_a)
    cos_b, sin_b = np.cos(state.angle_b), np.sin(state.angle_b)

    x = cx * (cos_b * cos_phi + sin_a * sin_b * sin_phi) - cy * cos_a * sin_b
    y = cx * (sin_b * cos_phi - sin_a * cos_b * sin_phi) + cy * cos_a * cos_b
    z = cos_a * cx * sin_phi + cy * sin_a
    return x, y, z


def shade(nx, ny, nz, config=DEFAULT_CONFIG):
    """Lambert term against the fixed light, clamped to [0, 1].

    Degenerate values (NaN, +-Inf) come out as 0.
    """
    lx, ly, lz = config.light_unit
    dot = nx * lx + ny * ly + nz * lz
    lum = np.clip(dot, 0.0, 1.0) * config.brightness
    lum = np.nan_to_num(lum, nan=0.0, posinf=0.0, neginf=0.0)
    return np.clip(lum, 0.0, 1.0)


def project(state, config=DEFAULT_CONFIG):
    """Project every (theta, phi) sample for the given rotation state."""
    theta = theta_grid(config)[:, np.newaxis]
    phi = phi_grid(config)[np.newaxis, :]

    cos_t, sin_t = np.cos(theta), np.sin(theta)
    cos_p, sin_p = np.cos(phi), np.sin(phi)

    circle_x = config.torus_radius + config.tube_radius * cos_t
    circle_y = config.tube_radius * sin_t
    x, y, z = rotate(circle_x, circle_y, cos_p, sin_p, state)
    nx, ny, nz = rotate(cos_t, sin_t, cos_p, sin_p, state)

    with np.errstate(divide="ignore", invalid="ignore"):
        ooz = 1.0 / (z + config.camera_distance)
        screen_x = config.center_x + config.projection_scale * ooz * x
        screen_y = config.center_y - config.projection_scale * ooz * y

    return Samples(screen_x, screen_y, ooz, shade(nx, ny, nz, config))


def quantize(luminance, levels=12):
    """Map luminance in [0, 1] to integer levels 0..levels-1."""
    if levels < 1:
        raise ValueError(f"levels must be at least 1, got {levels}")
    lum = np.nan_to_num(np.asarray(luminance, dtype=np.float64), nan=0.0)
    idx = np.floor(np.clip(lum, 0.0, 1.0) * levels).astype(np.int64)
    return np.minimum(idx, levels - 1)
