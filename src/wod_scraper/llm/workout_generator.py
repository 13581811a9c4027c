"""
Workout structuring with Anthropic Claude.

Turns extracted WOD text into a storable Workout. Model failures never
stop a scrape: every operation has a deterministic fallback that is
logged and returned instead.
"""

import json
import os
import re
import time
from typing import Any

import anthropic
from pydantic import ValidationError

from wod_scraper.config.settings import APILLMSettings
from wod_scraper.core.exceptions import APIAuthenticationError, WorkoutGenerationError
from wod_scraper.llm.models import WodAnalysis, Workout
from wod_scraper.llm.prompt_templates import PromptTemplate, WorkoutPrompts
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

CODE_FENCE_START = re.compile(r"^```\w*\n?")
CODE_FENCE_END = re.compile(r"\n?```$")
NON_ALNUM = re.compile(r"[^a-z0-9\s]")

SUGGESTIONS_FALLBACK = ["Unable to generate suggestions at this time"]


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = CODE_FENCE_START.sub("", text)
        text = CODE_FENCE_END.sub("", text)
        text = text.strip()
    return text


def fallback_workout(wod_text: str) -> Workout:
    """
    Build a workout from the raw text alone.

    The id is the first three words of the lowercased text with
    punctuation removed, or `workout-<unix ms>` if nothing is left.
    The name is the first line.
    """
    words = NON_ALNUM.sub("", wod_text.lower()).split()
    workout_id = "-".join(words[:3]) or f"workout-{int(time.time() * 1000)}"

    lines = wod_text.split("\n")
    name = lines[0].strip() if lines else ""

    return Workout(
        id=workout_id,
        name=name or "Untitled Workout",
        description=wod_text or "No description available",
        scope="private",
        scheme="time",
        rounds_to_score=1,
    )


def fallback_analysis() -> WodAnalysis:
    """Analysis returned when the model cannot analyze a WOD."""
    return WodAnalysis(
        summary="Unable to analyze workout automatically",
        movements=[],
        difficulty="intermediate",
        estimated_time="Unknown",
        equipment=[],
        tags=["crossfit"],
    )


class WorkoutGenerator:
    """
    Structures WOD text with an Anthropic model.

    Example:
        >>> generator = WorkoutGenerator.from_settings(settings.api_llm)
        >>> workout = generator.generate_workout("Fran\\n21-15-9 Thrusters, Pull-ups")
        >>> print(workout.scheme)
    """

    def __init__(
        self,
        client: Any,
        model_name: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        temperature: float = 0.2,
    ) -> None:
        """
        Initialize generator.

        Args:
            client: anthropic.Anthropic or any object with a compatible
                `messages.create`
            model_name: Model identifier
            max_tokens: Response token limit for workout structuring
            temperature: Sampling temperature for workout structuring
        """
        self.client = client
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: APILLMSettings) -> "WorkoutGenerator":
        """
        Create a generator backed by the Anthropic API.

        Raises:
            APIAuthenticationError: If the API key environment variable is unset
        """
        api_key = os.environ.get(settings.api_key_env_var)
        if not api_key:
            raise APIAuthenticationError(
                f"API key not found in environment variable {settings.api_key_env_var}",
                details={"env_var": settings.api_key_env_var},
            )

        client = anthropic.Anthropic(
            api_key=api_key,
            timeout=float(settings.timeout_seconds),
            max_retries=settings.max_retries,
        )
        return cls(
            client=client,
            model_name=settings.model_name,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )

    def _complete(
        self,
        template: PromptTemplate,
        max_tokens: int,
        temperature: float,
        **variables: Any,
    ) -> str:
        prompt = template.format(**variables)
        try:
            message = self.client.messages.create(
                model=self.model_name,
                max_tokens=max_tokens,
                temperature=temperature,
                system=prompt["system"],
                messages=[{"role": "user", "content": prompt["user"]}],
            )
        except anthropic.APIError as e:
            raise WorkoutGenerationError(
                f"Model call '{template.name}' failed: {e}") from e

        if not message.content:
            raise WorkoutGenerationError(
                f"Model call '{template.name}' returned no content")

        text = (message.content[0].text or "").strip()
        logger.debug(f"Model response for '{template.name}': {len(text)} chars")
        return text

    def _complete_json(
        self,
        template: PromptTemplate,
        max_tokens: int,
        temperature: float,
        **variables: Any,
    ) -> dict[str, Any]:
        text = strip_code_fences(
            self._complete(template, max_tokens, temperature, **variables))
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise WorkoutGenerationError(
                f"Response is not valid JSON: {e}", response_text=text) from e

        if not isinstance(data, dict):
            raise WorkoutGenerationError(
                "Response JSON is not an object", response_text=text)
        return data

    def generate_workout(self, wod_text: str) -> Workout:
        """
        Turn WOD text into a structured workout.

        Args:
            wod_text: Normalized WOD text

        Returns:
            Validated Workout, or the fallback workout if the model call,
            JSON parsing or validation fails
        """
        logger.info("Generating structured workout object from WOD text")
        try:
            data = self._complete_json(
                WorkoutPrompts.STRUCTURE_WORKOUT,
                self.max_tokens,
                self.temperature,
                wod_text=wod_text,
            )
            workout = Workout.model_validate(data)
        except (WorkoutGenerationError, ValidationError) as e:
            logger.error(f"Error generating workout object: {e}")
            return fallback_workout(wod_text)

        logger.info(
            f"Structured workout generated: {workout.name} ({workout.scheme})")
        return workout

    def analyze_wod(self, wod_text: str) -> WodAnalysis:
        """Summarize movements, difficulty and equipment of a WOD."""
        logger.info("Starting WOD analysis")
        try:
            data = self._complete_json(
                WorkoutPrompts.ANALYZE_WOD, 512, 0.3, wod_text=wod_text)
            analysis = WodAnalysis.model_validate(data)
        except (WorkoutGenerationError, ValidationError) as e:
            logger.error(f"Error analyzing WOD: {e}")
            return fallback_analysis()

        logger.info("WOD analysis completed")
        return analysis

    def suggest_variations(self, wod_text: str | None) -> list[str]:
        """Up to three scaled or advanced versions, one per line."""
        logger.info("Generating workout suggestions")
        try:
            text = self._complete(
                WorkoutPrompts.SUGGEST_VARIATIONS,
                256,
                0.5,
                wod_text=wod_text or "No workout details available",
            )
        except WorkoutGenerationError as e:
            logger.error(f"Error generating suggestions: {e}")
            return list(SUGGESTIONS_FALLBACK)

        suggestions = [line.strip() for line in text.split("\n") if line.strip()]
        return suggestions[:3] or list(SUGGESTIONS_FALLBACK)
