"""Domain layer — error catalog, identifiers, creation modes.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
