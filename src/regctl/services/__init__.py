"""Service layer — caller-facing operations returning ServiceResult.

Services may import from domain, core and infrastructure layers.
They must never import from commands or output.
"""
