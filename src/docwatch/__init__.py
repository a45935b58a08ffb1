"""docwatch - change intelligence for a watched document store."""

__version__ = "0.1.0"
