"""Domain layer: entities and the error taxonomy."""
