"""
Tests for LLM module.

Tests prompt templates, workout structuring and fallbacks using a
fake Anthropic client.
"""

import json

import anthropic
import httpx
import pytest

from wod_scraper.config import APILLMSettings
from wod_scraper.core.exceptions import APIAuthenticationError
from wod_scraper.llm import (
    Workout,
    WorkoutGenerator,
    WorkoutPrompts,
    fallback_workout,
    strip_code_fences,
)

FRAN_JSON = json.dumps({
    "id": "fran",
    "name": "Fran",
    "description": "21-15-9 reps for time of thrusters and pull-ups",
    "scope": "private",
    "scheme": "time",
    "repsPerRound": None,
    "roundsToScore": 1,
    "tiebreakScheme": None,
    "secondaryScheme": None,
})


def connection_error() -> anthropic.APIConnectionError:
    """An API error as raised by the real client."""
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return anthropic.APIConnectionError(request=request)


class TestPromptTemplates:
    """Tests for prompt formatting."""

    def test_structure_prompt_includes_text(self):
        """The WOD text should be substituted into the user prompt."""
        prompt = WorkoutPrompts.STRUCTURE_WORKOUT.format(wod_text="Run 5k")

        assert "Run 5k" in prompt["user"]
        assert '"roundsToScore"' in prompt["user"]
        assert "JSON" in prompt["system"]

    def test_all_templates_format(self):
        """Every template should format with wod_text."""
        for template in (
            WorkoutPrompts.STRUCTURE_WORKOUT,
            WorkoutPrompts.ANALYZE_WOD,
            WorkoutPrompts.SUGGEST_VARIATIONS,
        ):
            assert "Deadlift" in template.format_user(wod_text="Deadlift")


class TestStripCodeFences:
    """Tests for code fence removal."""

    def test_json_fence(self):
        """```json fences should be removed."""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        """Bare ``` fences should be removed."""
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        """Unfenced text should only be trimmed."""
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestFallbackWorkout:
    """Tests for the text-only workout."""

    def test_id_and_name_from_text(self):
        """ID comes from the first three words, name from the first line."""
        workout = fallback_workout("AMRAP 20:\n\n10 Burpees")

        assert workout.id == "amrap-20-10"
        assert workout.name == "AMRAP 20:"
        assert workout.description == "AMRAP 20:\n\n10 Burpees"
        assert workout.scheme == "time"
        assert workout.scope == "private"
        assert workout.rounds_to_score == 1

    def test_id_without_alphanumerics(self):
        """Text without letters or digits gets a timestamped ID."""
        workout = fallback_workout("!!! ???")

        assert workout.id.startswith("workout-")
        assert workout.name == "!!! ???"

    def test_empty_text(self):
        """Empty text gets placeholder name and description."""
        workout = fallback_workout("")

        assert workout.name == "Untitled Workout"
        assert workout.description == "No description available"


class TestWorkoutModel:
    """Tests for the Workout model."""

    def test_accepts_camel_case(self):
        """camelCase keys from the model should populate fields."""
        workout = Workout.model_validate({
            "name": "Cindy",
            "description": "20 min AMRAP",
            "scheme": "rounds-reps",
            "repsPerRound": 30,
        })

        assert workout.reps_per_round == 30
        assert workout.id is None

    def test_to_dict_uses_camel_case(self):
        """Serialization should use camelCase keys."""
        workout = Workout(name="Cindy", description="AMRAP", scheme="rounds-reps")

        data = workout.to_dict()

        assert data["roundsToScore"] == 1
        assert "repsPerRound" in data

    def test_secondary_scheme_excludes_time_with_cap(self):
        """time-with-cap is only valid as a primary scheme."""
        with pytest.raises(ValueError):
            Workout(
                name="x",
                description="y",
                scheme="time",
                secondary_scheme="time-with-cap",
            )


class TestWorkoutGenerator:
    """Tests for model-backed structuring."""

    def test_generate_workout(self, fake_client_factory):
        """Valid JSON should become a Workout."""
        client = fake_client_factory(FRAN_JSON)
        generator = WorkoutGenerator(client, model_name="test-model")

        workout = generator.generate_workout("Fran\n21-15-9 Thrusters, Pull-ups")

        assert workout.id == "fran"
        assert workout.scheme == "time"

        call = client.messages.calls[0]
        assert call["model"] == "test-model"
        assert call["max_tokens"] == 1024
        assert "Thrusters" in call["messages"][0]["content"]

    def test_generate_workout_fenced(self, fake_client_factory):
        """JSON wrapped in code fences should still parse."""
        client = fake_client_factory(f"```json\n{FRAN_JSON}\n```")

        workout = WorkoutGenerator(client).generate_workout("Fran")

        assert workout.name == "Fran"

    def test_invalid_json_falls_back(self, fake_client_factory):
        """Non-JSON output should give the fallback workout."""
        client = fake_client_factory("Sure! Here is your workout.")

        workout = WorkoutGenerator(client).generate_workout("AMRAP 20:\n\n10 Burpees")

        assert workout.id == "amrap-20-10"

    def test_invalid_scheme_falls_back(self, fake_client_factory):
        """JSON failing validation should give the fallback workout."""
        client = fake_client_factory(json.dumps({
            "name": "Odd", "description": "?", "scheme": "vibes"}))

        workout = WorkoutGenerator(client).generate_workout("Odd workout today")

        assert workout.scheme == "time"
        assert workout.name == "Odd workout today"

    def test_api_error_falls_back(self, fake_client_factory):
        """API errors should give the fallback workout."""
        client = fake_client_factory(connection_error())

        workout = WorkoutGenerator(client).generate_workout("Run 5k for time")

        assert workout.id == "run-5k-for"

    def test_empty_content_falls_back(self, fake_client_factory):
        """A response without content blocks should give the fallback."""
        client = fake_client_factory(None)

        workout = WorkoutGenerator(client).generate_workout("Row 2k")

        assert workout.name == "Row 2k"

    def test_json_array_falls_back(self, fake_client_factory):
        """A JSON value that is not an object should give the fallback."""
        client = fake_client_factory("[1, 2, 3]")

        workout = WorkoutGenerator(client).generate_workout("Bike 10 miles")

        assert workout.name == "Bike 10 miles"

    def test_analyze_wod(self, fake_client_factory):
        """Analysis JSON should be parsed."""
        client = fake_client_factory(json.dumps({
            "summary": "Couplet sprint",
            "movements": ["thruster", "pull-up"],
            "difficulty": "advanced",
            "estimatedTime": "5 minutes",
            "equipment": ["barbell", "pull-up bar"],
            "tags": ["benchmark"],
        }))

        analysis = WorkoutGenerator(client).analyze_wod("Fran")

        assert analysis.difficulty == "advanced"
        assert analysis.estimated_time == "5 minutes"

    def test_analyze_wod_fallback(self, fake_client_factory):
        """Analysis failures should give the fallback analysis."""
        client = fake_client_factory(connection_error())

        analysis = WorkoutGenerator(client).analyze_wod("Fran")

        assert analysis.summary == "Unable to analyze workout automatically"
        assert analysis.difficulty == "intermediate"
        assert analysis.estimated_time == "Unknown"
        assert analysis.tags == ["crossfit"]

    def test_suggest_variations(self, fake_client_factory):
        """At most three non-empty lines should be returned."""
        client = fake_client_factory(
            "1. Beginner: ring rows\n\n2. Scaled: 65 lb\n3. Rx+: 115 lb\n4. Extra")

        suggestions = WorkoutGenerator(client).suggest_variations("Fran")

        assert suggestions == [
            "1. Beginner: ring rows", "2. Scaled: 65 lb", "3. Rx+: 115 lb"]

    def test_suggest_variations_fallback(self, fake_client_factory):
        """Failures should give the fixed fallback suggestion."""
        client = fake_client_factory(connection_error())

        suggestions = WorkoutGenerator(client).suggest_variations(None)

        assert suggestions == ["Unable to generate suggestions at this time"]


class TestFromSettings:
    """Tests for building the generator from settings."""

    def test_missing_api_key(self, monkeypatch):
        """A missing key should raise APIAuthenticationError."""
        monkeypatch.delenv("WOD_TEST_KEY", raising=False)
        settings = APILLMSettings(api_key_env_var="WOD_TEST_KEY")

        with pytest.raises(APIAuthenticationError):
            WorkoutGenerator.from_settings(settings)

    def test_builds_anthropic_client(self, monkeypatch):
        """A present key should build an Anthropic client."""
        monkeypatch.setenv("WOD_TEST_KEY", "sk-test")
        settings = APILLMSettings(
            api_key_env_var="WOD_TEST_KEY", model_name="claude-test", max_tokens=500)

        generator = WorkoutGenerator.from_settings(settings)

        assert isinstance(generator.client, anthropic.Anthropic)
        assert generator.model_name == "claude-test"
        assert generator.max_tokens == 500
