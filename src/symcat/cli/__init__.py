"""symcat CLI."""
