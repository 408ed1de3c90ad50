"""Infrastructure layer: the HTTP client for the Home Assistant REST API.

This layer depends on the stdlib, httpx, and ``hactl.errors``.
It must never import from domain, services, commands, or output.
"""
