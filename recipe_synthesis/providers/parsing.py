"""
Recipe Text Parser

Extracts a structured recipe payload from generative-provider output, which
is free-form text that usually (but not always) contains a JSON object,
sometimes wrapped in prose or code fences.

Fallback tiers, tried in order:
1. Fenced code block (```json ... ``` or ``` ... ```) holding a JSON object
2. Brace span: first "{" to last "}" parsed as JSON
3. Free-text heuristics: title line, ingredient section, instruction section
4. Give up: ProviderMalformedError
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from recipe_synthesis.core.exceptions import ProviderMalformedError

logger = logging.getLogger(__name__)


FENCED_BLOCK_PATTERN = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)
BULLET_PATTERN = re.compile(r"^([-•*]|\d+[.)]|\d+/\d+|\d+\s+\w+)")
BULLET_PREFIX_PATTERN = re.compile(r"^([-•*]|\d+[.)])\s*")
HEADING_MARKUP_PATTERN = re.compile(r"^[#*\s]+|[*\s:]+$")

INGREDIENT_HEADINGS = ("ingredients",)
INSTRUCTION_HEADINGS = ("instructions", "directions", "steps", "method", "preparation")

# Below this length free text is treated as a refusal or noise.
MIN_FREE_TEXT_LENGTH = 20
MAX_TITLE_LENGTH = 80


class ParseTier(str, Enum):
    """Which tier produced the payload."""

    FENCED_BLOCK = "fenced_block"
    BRACE_SPAN = "brace_span"
    FREE_TEXT = "free_text"


@dataclass
class ParsedRecipe:
    """Raw recipe fields extracted from provider text."""

    payload: dict[str, Any]
    tier: ParseTier


@dataclass
class _FreeTextSections:
    title: Optional[str] = None
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)


class RecipeTextParser:
    """
    Tiered parser for generative provider output.

    Example:
        >>> parser = RecipeTextParser(provider="gemini")
        >>> parsed = parser.parse('Here you go: {"name": "Omelette"}')
        >>> parsed.tier
        <ParseTier.BRACE_SPAN: 'brace_span'>
    """

    def __init__(self, provider: str = "unknown") -> None:
        self._provider = provider

    def parse(self, text: str) -> ParsedRecipe:
        """
        Extract a recipe payload from ``text``.

        Raises:
            ProviderMalformedError: If no tier can extract a recipe
        """
        if not text or not text.strip():
            raise ProviderMalformedError("Provider returned empty text", provider=self._provider)

        payload = self._from_fenced_block(text)
        if payload is not None:
            return ParsedRecipe(payload=payload, tier=ParseTier.FENCED_BLOCK)

        payload = self._from_brace_span(text)
        if payload is not None:
            return ParsedRecipe(payload=payload, tier=ParseTier.BRACE_SPAN)

        payload = self.extract_free_text(text)
        if payload is not None:
            return ParsedRecipe(payload=payload, tier=ParseTier.FREE_TEXT)

        raise ProviderMalformedError(
            f"Could not extract a recipe from provider text ({len(text)} chars)",
            provider=self._provider,
        )

    # =========================================================================
    # Tier 1 and 2: JSON
    # =========================================================================

    def _from_fenced_block(self, text: str) -> Optional[dict[str, Any]]:
        for match in FENCED_BLOCK_PATTERN.finditer(text):
            payload = self._loads_object(match.group(1))
            if payload is not None:
                return payload
        return None

    def _from_brace_span(self, text: str) -> Optional[dict[str, Any]]:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return None
        return self._loads_object(text[start : end + 1])

    def _loads_object(self, candidate: str) -> Optional[dict[str, Any]]:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug(f"JSON candidate from {self._provider} rejected: {e}")
            return None
        return value if isinstance(value, dict) else None

    # =========================================================================
    # Tier 3: free text
    # =========================================================================

    def extract_free_text(self, text: str) -> Optional[dict[str, Any]]:
        """
        Heuristically split prose into title, ingredients and instructions.

        Returns:
            Payload dict, or None if the text is too short to be a recipe
        """
        stripped = text.strip()
        if len(stripped) < MIN_FREE_TEXT_LENGTH:
            return None

        sections = self._split_sections(stripped)
        payload: dict[str, Any] = {
            "instructions": "\n".join(sections.instructions) or stripped,
        }
        if sections.title:
            payload["name"] = sections.title
        if sections.ingredients:
            payload["ingredients"] = sections.ingredients
        return payload

    def _split_sections(self, text: str) -> _FreeTextSections:
        sections = _FreeTextSections()
        current: Optional[str] = None

        for line in text.splitlines():
            trimmed = line.strip()
            if not trimmed:
                continue

            if self._is_heading(trimmed, INGREDIENT_HEADINGS):
                current = "ingredients"
                continue
            if self._is_heading(trimmed, INSTRUCTION_HEADINGS):
                current = "instructions"
                continue

            if current is None:
                if (
                    sections.title is None
                    and len(trimmed) <= MAX_TITLE_LENGTH
                    and not trimmed.endswith(":")
                ):
                    sections.title = self._clean_heading(trimmed)
                continue

            if current == "ingredients":
                if not trimmed.endswith(":") and BULLET_PATTERN.match(trimmed):
                    sections.ingredients.append(BULLET_PREFIX_PATTERN.sub("", trimmed))
            else:
                sections.instructions.append(trimmed)

        return sections

    @staticmethod
    def _is_heading(line: str, headings: tuple[str, ...]) -> bool:
        # Headings are short lines led by the section name ("## Ingredients:", "**Steps**").
        words = HEADING_MARKUP_PATTERN.sub("", line.lower()).split()
        return bool(words) and len(words) <= 3 and words[0].strip(":") in headings

    @staticmethod
    def _clean_heading(line: str) -> Optional[str]:
        cleaned = HEADING_MARKUP_PATTERN.sub("", line).strip()
        return cleaned or None
