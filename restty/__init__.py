"""restty - interactive HTTP request tool with synchronised history."""

__version__ = "1.0.0"
