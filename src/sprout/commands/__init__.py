"""Command implementations for the Sprout CLI."""
