"""Command-line interface for cndl."""
