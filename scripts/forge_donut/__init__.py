"""forge_donut: render a spinning torus into a 320x240 luminance raster.

Each frame samples the torus surface over a fixed theta x phi grid, rotates it
by two angles (A, B), projects it with a perspective divide, shades it against
a fixed light, and scatters the result into the frame buffer keeping the
brightest sample per pixel. A and B advance by 0.01 and 0.03 per frame.

Usage:
    python scripts/forge_donut                     # animate in the terminal
    python scripts/forge_donut --show              # animate in a window
    python scripts/forge_donut --png donut.png     # one frame
    python scripts/forge_donut --gif donut.gif --frames 120

Requires: pip install numpy matplotlib Pillow
"""
