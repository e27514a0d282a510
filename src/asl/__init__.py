"""asl - Linux distributions as containers."""

__version__ = "1.0.0"
