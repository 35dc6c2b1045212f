"""
Resilience Package - timeouts, the fallback chain and its last resort.

Note: Import FallbackOrchestrator directly from
recipe_synthesis.resilience.orchestrator; it depends on the services package,
which itself imports from this package.
"""

from recipe_synthesis.resilience.emergency import synthesize_emergency_recipe
from recipe_synthesis.resilience.timeouts import OperationTimeoutError, run_with_timeout

__all__ = [
    "OperationTimeoutError",
    "run_with_timeout",
    "synthesize_emergency_recipe",
]
