"""Domain layer: entity ids, the operation catalog, and policy rules.

This layer depends only on the stdlib and ``hactl.errors``.
It must never import from services, infrastructure, commands, or config.
"""
