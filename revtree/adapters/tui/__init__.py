"""Interactive terminal user interface."""
