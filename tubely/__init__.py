"""Video-hosting HTTP server with SQLite storage, local assets and ffmpeg helpers."""

__version__ = "0.1.0"