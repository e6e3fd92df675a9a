"""Prompts module - centralized prompt templates for AI services.

Re-exports all prompt constants and utilities for easy importing:
    from services.prompts import PROMPT_VERSIONS, build_editorial_prompt
"""

from services.prompts.editorial import (
    ATTRIBUTION_SENTENCE,
    EDITORIAL_SUGGESTIONS_V1,
    build_editorial_prompt,
)

# Prompt version identifiers, logged with every generation call.
# Increment when a prompt's wording or schema changes.
PROMPT_VERSIONS = {
    "editorial_suggestions": "v1",
}

__all__ = [
    # Version tracking
    "PROMPT_VERSIONS",
    # Editorial prompts
    "EDITORIAL_SUGGESTIONS_V1",
    "ATTRIBUTION_SENTENCE",
    "build_editorial_prompt",
]
