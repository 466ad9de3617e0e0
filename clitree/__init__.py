"""Command trees with flags, typed positional arguments, categories and tracing."""

__version__ = "0.1.0"
__all__ = ["args", "category", "command", "tracing"]