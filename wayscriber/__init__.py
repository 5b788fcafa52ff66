"""Screenshot capture helpers and configuration types for a Wayland screen annotation tool."""

__version__ = "0.5.1"