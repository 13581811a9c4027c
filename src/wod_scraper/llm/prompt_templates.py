"""
Prompt templates for workout structuring.

Provides structured prompts for:
- Turning WOD text into a storable workout object
- Analyzing a WOD
- Suggesting scaled and advanced variations
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class PromptTemplate:
    """
    A reusable prompt template with variable substitution.

    Example:
        >>> template = PromptTemplate(
        ...     name="summarize",
        ...     system="You are a CrossFit coach.",
        ...     user="Summarize this workout:\\n\\n{wod_text}",
        ... )
        >>> prompt = template.format(wod_text="Fran: 21-15-9 ...")
    """

    name: str
    system: str
    user: str

    def format(self, **kwargs: Any) -> dict[str, str]:
        """
        Format the template with provided variables.

        Args:
            **kwargs: Variables to substitute

        Returns:
            Dictionary with formatted system and user prompts
        """
        return {
            "system": self.system.format(**kwargs) if kwargs else self.system,
            "user": self.user.format(**kwargs) if kwargs else self.user,
        }

    def format_user(self, **kwargs: Any) -> str:
        """Format just the user prompt."""
        return self.user.format(**kwargs) if kwargs else self.user


class WorkoutPrompts:
    """
    Prompt templates for workout structuring tasks.

    JSON examples in the user prompts use doubled braces so they survive
    str.format.
    """

    STRUCTURE_WORKOUT = PromptTemplate(
        name="structure_workout",
        system=(
            "You are a CrossFit expert. You turn workout descriptions into "
            "structured workout objects. Only respond with valid JSON, no "
            "additional text."
        ),
        user=(
            "Analyze the following workout (WOD) and provide a structured "
            "workout object.\n\n"
            "WOD:\n---\n{wod_text}\n---\n\n"
            "Respond with a JSON object with this structure:\n"
            "{{\n"
            '  "id": "unique-workout-slug",\n'
            '  "name": "Clear workout name/title",\n'
            '  "description": "Detailed description of the workout",\n'
            '  "scope": "private",\n'
            '  "scheme": "primary_scoring_scheme",\n'
            '  "repsPerRound": number_or_null,\n'
            '  "roundsToScore": number_default_1,\n'
            '  "tiebreakScheme": "time_or_reps_or_null",\n'
            '  "secondaryScheme": "secondary_scheme_or_null"\n'
            "}}\n\n"
            "For the scheme field, choose from:\n"
            '- "time" for time-based workouts (finish as fast as possible)\n'
            '- "time-with-cap" for time workouts with a time cap\n'
            '- "rounds-reps" for AMRAP (As Many Rounds As Possible)\n'
            '- "reps" for max reps in a given time\n'
            '- "emom" for Every Minute On the Minute\n'
            '- "load" for max weight/load\n'
            '- "calories", "meters", "feet" for distance/calorie based\n'
            '- "points" for point-based scoring\n'
            '- "pass-fail" for completion-based workouts\n\n'
            "Guidelines:\n"
            "- Generate a descriptive slug ID based on the workout content\n"
            "- Extract or create a clear workout name\n"
            "- Describe the movements and structure in the description\n"
            "- Set repsPerRound if it's a rounds-based workout\n"
            "- Set roundsToScore (usually 1)\n"
            "- Include tiebreakScheme only if there's a clear tiebreaker\n"
            "- Include secondaryScheme only if there's a secondary scoring component\n\n"
            "JSON:"
        ),
    )

    ANALYZE_WOD = PromptTemplate(
        name="analyze_wod",
        system=(
            "You are a CrossFit expert. Analyze workouts accurately and "
            "concisely. Only respond with valid JSON, no additional text."
        ),
        user=(
            "Analyze the following workout (WOD).\n\n"
            "WOD:\n---\n{wod_text}\n---\n\n"
            "Respond with a JSON object in this format:\n"
            "{{\n"
            '  "summary": "Brief description of the workout",\n'
            '  "movements": ["list", "of", "movements"],\n'
            '  "difficulty": "beginner|intermediate|advanced",\n'
            '  "estimatedTime": "estimated time to complete",\n'
            '  "equipment": ["list", "of", "equipment", "needed"],\n'
            '  "tags": ["descriptive", "tags"]\n'
            "}}\n\n"
            "JSON:"
        ),
    )

    SUGGEST_VARIATIONS = PromptTemplate(
        name="suggest_variations",
        system=(
            "You are a CrossFit coach who scales workouts for athletes of "
            "every level."
        ),
        user=(
            "Based on this CrossFit workout, suggest 3 modifications or "
            "variations:\n\n"
            "WOD:\n---\n{wod_text}\n---\n\n"
            "Provide 3 practical modifications (beginner, scaled, or advanced "
            "versions). Format as a simple list, one per line."
        ),
    )
