"""Command line interface for the twin-stick template generator."""
