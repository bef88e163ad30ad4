"""Infrastructure layer: database engine and repository implementations."""
