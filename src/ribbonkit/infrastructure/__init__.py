"""File loading and output writers."""
