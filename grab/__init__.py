"""grab - install GitHub release binaries declared in a manifest."""

__version__ = "0.1.0"
