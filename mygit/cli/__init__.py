"""Command-line interface for mygit."""
