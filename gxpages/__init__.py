"""Development server, lesson content and in-memory page model for a lesson site."""

__version__ = "0.1.0"
__all__ = ["dom", "editor", "lessons", "server"]