"""Agent utilities."""
