"""Dotfiles installer (Python-first, step-driven).

Core design goals:
- Distribution detected once, threaded through every step
- Idempotent steps (skip when the marker path already exists)
- Argument-vector subprocess calls, never shell strings
- Decisions made up front, no prompting inside steps
- Centralized logging
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
