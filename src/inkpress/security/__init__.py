"""Security helpers for inkpress."""
