"""Adapters connecting the stubcraft core to files, consoles and declaration documents."""
