"""Convert a local repository into a single text file."""

__version__ = "0.1.0"
