"""Infrastructure layer — registries, release file reading, and graph analysis.

May import from domain. Must never import from services, commands, or output.
"""
