"""Constellation Viewer: interactive constellation line-figure diagrams.

This package projects catalog star coordinates onto a flat viewport,
connects them into constellation stick figures, and supports pan, zoom,
pinch and hover inspection without artifacts at the RA 0°/360° seam.
"""

__version__ = "0.1.0"
__author__ = "Maximilian Sperlich"
