"""Domain models, constants and errors."""
