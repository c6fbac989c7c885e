"""Configuration providers."""
