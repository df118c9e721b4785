"""Domain layer: import rows, directory index, rule catalogs, evaluator.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
