"""Infrastructure layer: repositories and catalog/scenario file loading.

This layer depends on the domain model and on the service contracts it
implements or parses into. It must never import from commands or output.
"""
