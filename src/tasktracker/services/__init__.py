"""Service layer wiring the task store to configuration."""
