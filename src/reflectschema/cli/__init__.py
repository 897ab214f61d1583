"""Command-line helpers for reflectschema.

``run_reflect`` is the only entry point; it backs the ``reflectschema``
console script.
"""

from .reflect import main as run_reflect

__all__ = ["run_reflect"]
