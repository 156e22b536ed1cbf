"""TaskTimer CLI - countdown task manager for the terminal."""

__version__ = "0.3.0"
