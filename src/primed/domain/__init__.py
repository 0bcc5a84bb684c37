"""Domain layer — field options, factory variants, and field rules.

This layer depends only on stdlib, pydantic, and primed.errors.
It must never import from registry, engine, config, or plugins.
"""
