"""crosswalk - source-to-source translation pipeline."""

__version__ = "0.1.0"
