"""Master-stack layout engine, control protocol and server, and gharialctl for river."""

__version__ = "0.2.0"