"""canvasctl — validated command dispatch for remote design canvases."""

__version__ = "0.3.0"
