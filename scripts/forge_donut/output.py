"""Emit rendered frames: PNG/GIF via Pillow, terminal text, matplotlib."""

import contextlib
import os
import sys

import numpy as np
from PIL import Image

from ._common import ASCII_RAMP, DEFAULT_CONFIG, DPI, STYLE, relpath
from .torus import quantize

# ANSI escape sequences for terminal animation
CLEAR_SCREEN = "\033[2J"
CURSOR_HOME = "\033[H"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

# Pixels per character cell (rows, cols); terminal cells are about 2:1
ASCII_CELL = (8, 4)


def to_image(buffer):
    """Grayscale Pillow image from a [0, 1] luminance buffer."""
    pixels = np.clip(np.nan_to_num(buffer, nan=0.0), 0.0, 1.0)
    return Image.fromarray(np.round(pixels * 255.0).astype(np.uint8))


def save_png(buffer, path):
    """Write one frame as a grayscale PNG."""
    to_image(buffer).save(path, optimize=True)
    size_kb = os.path.getsize(path) / 1024
    print(f"Saved {relpath(path)} ({size_kb:.1f} KB)")


def save_gif(buffers, path, duration_ms=33):
    """Assemble frames into a looping animated GIF.

    Returns the number of frames written; zero frames writes nothing.
    """
    images = [to_image(b) for b in buffers]
    if not images:
        print("No frames to write!", file=sys.stderr)
        return 0

    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        duration=duration_ms,
        loop=0,
        optimize=True,
    )
    size_kb = os.path.getsize(path) / 1024
    print(f"Saved {relpath(path)} ({size_kb:.1f} KB, {len(images)} frames)")
    return len(images)


def to_ascii(buffer, ramp=ASCII_RAMP, cell=ASCII_CELL):
    """Render a buffer as text, one character per cell of pixels.

    Each cell keeps its brightest pixel.  Unlit cells are spaces; lit cells
    index into the ramp, darkest first.
    """
    if not ramp:
        raise ValueError("Character ramp must not be empty")
    cell_h, cell_w = cell
    h, w = buffer.shape
    rows, cols = h // cell_h, w // cell_w
    if rows == 0 or cols == 0:
        raise ValueError(f"Cell {cell} is larger than the {w}x{h} buffer")

    pooled = (
        buffer[: rows * cell_h, : cols * cell_w]
        .reshape(rows, cell_h, cols, cell_w)
        .max(axis=(1, 3))
    )
    levels = quantize(pooled, len(ramp))
    chars = np.array(list(ramp))[levels]
    chars[~(pooled > 0.0)] = " "
    return "\n".join("".join(row) for row in chars)


@contextlib.contextmanager
def terminal(stream=None):
    """Clear the screen and hide the cursor for the duration of the block."""
    out = stream or sys.stdout
    out.write(CLEAR_SCREEN + HIDE_CURSOR)
    out.flush()
    try:
        yield out
    finally:
        out.write(SHOW_CURSOR + "\n")
        out.flush()


def ascii_sink(stream=None, ramp=ASCII_RAMP, cell=ASCII_CELL):
    """Frame sink that redraws the terminal in place."""
    out = stream or sys.stdout

    def sink(_state, buffer):
        out.write(CURSOR_HOME + to_ascii(buffer, ramp, cell))
        out.flush()

    return sink


def _colormap():
    from matplotlib.colors import LinearSegmentedColormap

    return LinearSegmentedColormap.from_list(
        "donut", [STYLE["bg"], STYLE["accent1"], STYLE["warn"]]
    )


def _frame_axes(fig, shape):
    ax = fig.add_subplot(111)
    ax.set_facecolor(STYLE["bg"])
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_color(STYLE["grid"])
        spine.set_linewidth(0.5)
    image = ax.imshow(
        np.zeros(shape),
        cmap=_colormap(),
        vmin=0.0,
        vmax=1.0,
        interpolation="nearest",
    )
    return ax, image


def show_frame(buffer, path, title=None):
    """Save a styled matplotlib figure of one buffer."""
    import matplotlib.pyplot as plt

    h, w = buffer.shape
    fig = plt.figure(figsize=(w / 80, h / 80), facecolor=STYLE["bg"])
    ax, image = _frame_axes(fig, buffer.shape)
    image.set_data(buffer)
    if title:
        ax.set_title(title, color=STYLE["text"], fontsize=12, fontweight="bold", pad=8)
    try:
        fig.savefig(
            path,
            dpi=DPI,
            bbox_inches="tight",
            facecolor=STYLE["bg"],
            pad_inches=0.2,
        )
    finally:
        plt.close(fig)
    print(f"  {relpath(path)}")


def preview(frame_source, config=DEFAULT_CONFIG, fps=30):
    """Animate (state, buffer) pairs from frame_source in a matplotlib window.

    Blocks until the window is closed.
    """
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation

    fig = plt.figure(
        figsize=(config.width / 80, config.height / 80), facecolor=STYLE["bg"]
    )
    ax, image = _frame_axes(fig, config.shape)
    label = ax.text(
        0.02,
        0.96,
        "",
        transform=ax.transAxes,
        color=STYLE["text_dim"],
        fontsize=8,
        va="top",
    )

    def update(frame):
        state, buffer = frame
        image.set_data(buffer)
        label.set_text(f"A={state.angle_a:.2f}  B={state.angle_b:.2f}")
        return image, label

    # Keep a reference or the animation is garbage collected
    anim = FuncAnimation(
        fig,
        update,
        frames=frame_source,
        interval=1000.0 / fps if fps else 1,
        blit=True,
        cache_frame_data=False,
    )
    plt.show()
    return anim
