"""Infrastructure layer — transports, bridge app, session persistence."""
