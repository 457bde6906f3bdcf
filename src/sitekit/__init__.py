"""Supporting libraries for a server-rendered web application."""

__version__ = "0.1.0"
