"""Infrastructure adapters implementing the ports."""
