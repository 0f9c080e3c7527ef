"""Domain layer — relationships, concepts, and group hashing.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
