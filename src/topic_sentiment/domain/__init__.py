"""Domain layer: pure value objects, no I/O."""
