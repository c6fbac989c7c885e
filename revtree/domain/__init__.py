"""Domain models: entities, value objects, configuration and errors."""
