"""Ask natural-language questions about a git repository."""

__version__ = "0.1.0"
