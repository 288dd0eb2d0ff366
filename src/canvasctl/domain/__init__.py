"""Domain layer — parameter contracts, operation catalog, command envelopes.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
