"""Service layer: the operation registry and its result envelope.

Services may import from domain, config, and infrastructure layers.
They must never import from commands, output, or mcp.
"""
