"""Pan/zoom an image behind a fixed crop window and crop it at native resolution."""

__version__ = "0.1.0"
