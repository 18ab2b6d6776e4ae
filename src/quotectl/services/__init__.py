"""Service layer: use cases, contracts, and the ServiceResult adapter.

Services may import from domain and infrastructure ports.
They must never import from commands or output.
"""
