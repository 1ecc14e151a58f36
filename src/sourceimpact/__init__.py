"""Source change impact engine for requirements built on ingested documents."""

__version__ = "0.1.0"
