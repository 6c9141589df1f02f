"""Domain layer — classifications, numbering rules, letter records.

This layer depends only on stdlib and pydantic.
It must never import from core, services, infrastructure, commands, or config.
"""
