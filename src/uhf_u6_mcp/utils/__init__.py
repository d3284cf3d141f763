"""Small encoding helpers shared across layers."""
