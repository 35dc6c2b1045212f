"""Recipe Synthesis - resilient recipe generation service.

Note: Import `app` directly from `recipe_synthesis.main` to avoid circular imports.
"""

__all__ = ["main", "api", "core", "models"]
