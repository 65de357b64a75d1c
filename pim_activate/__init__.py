"""PIM Activate - just-in-time Azure resource role activation."""

__version__ = "1.0.0"
