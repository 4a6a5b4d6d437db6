"""Entry points into the application."""
