"""Infrastructure layer - provider adapters, storage and wiring."""
