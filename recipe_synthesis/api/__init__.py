"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: API endpoint routers (health, recipes, admin)
- middleware: Request logging with correlation IDs
- deps: FastAPI dependency injection functions

Note: Import routers directly from recipe_synthesis.api.routes to avoid circular imports.
"""

__all__ = ["routes", "middleware", "deps"]
