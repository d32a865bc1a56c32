"""Command line interface for lingueta."""
