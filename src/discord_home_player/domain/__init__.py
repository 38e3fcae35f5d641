"""Domain layer - models, value objects, exceptions and events."""
