"""Domain layer — calendar primitives, periods, and recurrence expressions.

This layer depends only on the standard library.
It must never import from services, commands, config, or output.
"""
