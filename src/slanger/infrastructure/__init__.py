"""Infrastructure layer: cache backends and document files.

This layer depends on stdlib and third-party libs (redis, ruamel.yaml).
It must never import from domain, services, commands, or output: it
moves strings and plain mappings, and the service layer gives them
meaning.
"""
