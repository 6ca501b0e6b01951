"""Command implementations for quicker-git."""
