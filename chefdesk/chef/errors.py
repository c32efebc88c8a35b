from __future__ import annotations


class ChefError(Exception):
    """Base class for chef assistant failures."""


class GenerationError(ChefError):
    """The LLM call failed, returned no content, or is not configured."""
