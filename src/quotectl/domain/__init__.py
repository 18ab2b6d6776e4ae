"""Domain layer: value objects, entities, and pricing rules.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
