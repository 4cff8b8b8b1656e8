"""Core business logic layer.

Subpackages:
- ingredients: parsing, normalization and scaling of ingredient lines
- shopping: building the consolidated shopping list
- generation: randomized slot assignment and plan generation
"""
__all__ = ["ingredients", "shopping", "generation"]
