"""Gitleaks execution tracking for git commit hooks."""

__version__ = "0.1.0"

__all__ = ["__version__"]
