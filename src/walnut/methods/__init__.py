"""Sample custom methods bundled with walnut.

Loaded by :func:`walnut.core.registry.default_registry`.
"""
