"""Service layer — result types consumed by the CLI.

Services must never import from commands or output.
"""
