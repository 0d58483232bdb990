"""Infrastructure layer: SQLModel-backed implementations."""
