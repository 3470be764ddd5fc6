"""Command line interface for stubcraft."""
