import io
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
from PIL import Image  # noqa: E402

# Allow `import forge_donut.*` from the scripts directory.
_SCRIPTS_DIR = Path(__file__).resolve().parents[2]
if str(_SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(_SCRIPTS_DIR))


class TestImages(unittest.TestCase):
    def test_to_image_is_grayscale_and_scaled(self) -> None:
        from forge_donut.output import to_image

        buffer = np.zeros((240, 320))
        buffer[10, 20] = 1.0
        buffer[11, 20] = 0.5
        img = to_image(buffer)
        self.assertEqual(img.mode, "L")
        self.assertEqual(img.size, (320, 240))
        self.assertEqual(img.getpixel((20, 10)), 255)
        self.assertEqual(img.getpixel((20, 11)), 128)
        self.assertEqual(img.getpixel((0, 0)), 0)

    def test_png_round_trip(self) -> None:
        from forge_donut.animation import State
        from forge_donut.output import save_png
        from forge_donut.raster import render

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "frame.png")
            with redirect_stdout(io.StringIO()):
                save_png(render(State(0.4, 0.8)), path)
            with Image.open(path) as img:
                self.assertEqual(img.size, (320, 240))
                self.assertGreater(img.getextrema()[1], 0)

    def test_gif_holds_every_frame(self) -> None:
        from forge_donut.animation import State, frames
        from forge_donut.output import save_gif

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "spin.gif")
            buffers = [b for _, b in frames(State(), count=3)]
            with redirect_stdout(io.StringIO()):
                written = save_gif(buffers, path)
            self.assertEqual(written, 3)
            with Image.open(path) as img:
                self.assertEqual(img.n_frames, 3)
                self.assertEqual(img.size, (320, 240))

    def test_gif_without_frames_writes_nothing(self) -> None:
        from forge_donut.output import save_gif

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "empty.gif")
            with redirect_stdout(io.StringIO()):
                self.assertEqual(save_gif([], path), 0)
            self.assertFalse(os.path.exists(path))

    def test_styled_frame_is_written(self) -> None:
        from forge_donut.animation import State
        from forge_donut.output import show_frame
        from forge_donut.raster import render

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "thumb.png")
            with redirect_stdout(io.StringIO()):
                show_frame(render(State()), path, title="A=0.00  B=0.00")
            self.assertTrue(os.path.isfile(path))


class TestPreview(unittest.TestCase):
    def test_animation_draws_each_frame(self) -> None:
        import matplotlib.pyplot as plt

        from forge_donut._common import TorusConfig
        from forge_donut.animation import State, frames
        from forge_donut.output import preview

        config = TorusConfig(theta_step=0.5, phi_step=0.5, width=64, height=48)
        source = list(frames(State(0.5, 1.5), config, count=2))
        try:
            anim = preview(source, config, fps=10)
            image, label = anim._func(source[1])
            self.assertTrue(np.array_equal(image.get_array(), source[1][1]))
            self.assertEqual(label.get_text(), "A=0.51  B=1.53")
        finally:
            plt.close("all")


class TestAscii(unittest.TestCase):
    def test_default_frame_is_thirty_by_eighty(self) -> None:
        from forge_donut._common import ASCII_RAMP
        from forge_donut.animation import State
        from forge_donut.output import to_ascii
        from forge_donut.raster import render

        text = to_ascii(render(State(1.0, 1.0)))
        lines = text.split("\n")
        self.assertEqual(len(lines), 30)
        self.assertTrue(all(len(line) == 80 for line in lines))
        self.assertLessEqual(set(text) - {"\n"}, set(ASCII_RAMP) | {" "})
        self.assertTrue(set(text) & set(ASCII_RAMP))

    def test_ramp_ends(self) -> None:
        from forge_donut.output import to_ascii

        self.assertEqual(to_ascii(np.zeros((16, 8)), cell=(8, 4)), "  \n  ")
        self.assertEqual(to_ascii(np.ones((16, 8)), cell=(8, 4)), "@@\n@@")

    def test_cell_keeps_its_brightest_pixel(self) -> None:
        from forge_donut.output import to_ascii

        buffer = np.zeros((8, 4))
        buffer[7, 3] = 1.0
        self.assertEqual(to_ascii(buffer, cell=(8, 4)), "@")

    def test_oversized_cell_raises(self) -> None:
        from forge_donut.output import to_ascii

        with self.assertRaises(ValueError):
            to_ascii(np.zeros((4, 4)), cell=(8, 4))
        with self.assertRaises(ValueError):
            to_ascii(np.zeros((8, 8)), ramp="")

    def test_terminal_restores_cursor(self) -> None:
        from forge_donut.output import HIDE_CURSOR, SHOW_CURSOR, ascii_sink, terminal

        stream = io.StringIO()
        with terminal(stream) as out:
            ascii_sink(out, cell=(8, 4))(None, np.ones((8, 8)))
        text = stream.getvalue()
        self.assertIn(HIDE_CURSOR, text)
        self.assertIn("@@", text)
        self.assertTrue(text.rstrip("\n").endswith(SHOW_CURSOR))


if __name__ == "__main__":
    unittest.main()
