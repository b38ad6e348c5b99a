"""Service layer: pruning, caching, orchestration, and CLI-facing services.

Services may import from domain, validation and infrastructure layers.
They must never import from commands or output.
"""
