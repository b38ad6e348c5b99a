"""Domain layer: document model, enums, policies, and fingerprints.

This layer depends only on stdlib and pydantic.
It must never import from validation, services, infrastructure, commands, or config.
"""
