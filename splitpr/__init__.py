"""Split a multi-file diff into one patch file per changed file."""

__version__ = "0.1.0"
