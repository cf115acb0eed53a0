"""Frame buffer allocation, max-reduce scatter, and single-frame rendering."""

import numpy as np

from ._common import DEFAULT_CONFIG
from .torus import project


def new_buffer(config=DEFAULT_CONFIG):
    """Zeroed (height, width) luminance buffer."""
    return np.zeros(config.shape, dtype=np.float64)


def to_pixels(samples):
    """Integer (rows, cols) for projected samples.

    Coordinates are floored, so a sample at x = 12.9 lands in column 12.
    Non-finite coordinates map to -1, which the scatter drops.
    """
    sx = np.asarray(samples.screen_x, dtype=np.float64)
    sy = np.asarray(samples.screen_y, dtype=np.float64)
    finite = np.isfinite(sx) & np.isfinite(sy)

    cols = np.full(sx.shape, -1, dtype=np.int64)
    rows = np.full(sy.shape, -1, dtype=np.int64)
    cols[finite] = np.floor(sx[finite]).astype(np.int64)
    rows[finite] = np.floor(sy[finite]).astype(np.int64)
    return rows, cols


def scatter_max(buffer, rows, cols, values):
    """Write values into buffer at (rows, cols), keeping the max per pixel.

    Samples outside the buffer are dropped silently.  Returns the number of
    samples written.
    """
    if buffer.ndim != 2:
        raise ValueError(f"Buffer must be 2D, got shape {buffer.shape}")
    rows = np.asarray(rows)
    cols = np.asarray(cols)
    values = np.asarray(values, dtype=buffer.dtype)
    if not (rows.shape == cols.shape == values.shape):
        raise ValueError(
            f"Mismatched sample shapes: rows {rows.shape}, cols {cols.shape}, "
            f"values {values.shape}"
        )

    rows = rows.ravel()
    cols = cols.ravel()
    values = values.ravel()

    h, w = buffer.shape
    keep = (rows >= 0) & (rows < h) & (cols >= 0) & (cols < w)
    keep &= np.isfinite(values)

    # ufunc.at is unbuffered: repeated indices all take part in the max
    np.maximum.at(buffer, (rows[keep], cols[keep]), values[keep])
    return int(np.count_nonzero(keep))


def render(state, config=DEFAULT_CONFIG):
    """Render one frame for the given rotation state into a fresh buffer."""
    samples = project(state, config)
    rows, cols = to_pixels(samples)
    buffer = new_buffer(config)
    scatter_max(buffer, rows, cols, samples.luminance)
    return buffer
