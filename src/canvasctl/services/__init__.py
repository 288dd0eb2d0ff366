"""Service layer — dispatch pipeline, tool catalog, sessions."""
