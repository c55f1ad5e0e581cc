"""Command-line interface for inkpress."""
