"""Infrastructure layer: persistence and delivery provider adapters."""
