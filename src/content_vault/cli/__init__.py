"""Command-line interface for the content vault."""
