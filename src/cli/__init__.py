"""Command-line inspection of stored config files."""
