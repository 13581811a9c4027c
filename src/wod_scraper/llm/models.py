"""
Structured workout models returned by the language model.

Field names are snake_case in Python; the model is prompted with, and
serializes to, the camelCase keys the workouts table was designed around.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Scheme = Literal[
    "time",
    "time-with-cap",
    "pass-fail",
    "rounds-reps",
    "reps",
    "emom",
    "load",
    "calories",
    "meters",
    "feet",
    "points",
]

SecondaryScheme = Literal[
    "time",
    "pass-fail",
    "rounds-reps",
    "reps",
    "emom",
    "load",
    "calories",
    "meters",
    "feet",
    "points",
]

TiebreakScheme = Literal["time", "reps"]

Scope = Literal["private", "public"]

Difficulty = Literal["beginner", "intermediate", "advanced"]


class Workout(BaseModel):
    """
    A structured workout ready to be stored.

    Accepts both `reps_per_round` and `repsPerRound` style keys.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = Field(
        default=None,
        description="Slug identifying the workout; generated on insert if absent",
    )
    name: str = Field(description="Name or title of the workout")
    description: str = Field(description="Detailed description of the workout")
    scope: Scope = Field(default="private", description="Visibility of the workout")
    scheme: Scheme = Field(description="Primary scoring scheme")
    reps_per_round: int | None = Field(
        default=None,
        ge=0,
        description="Reps per round for rounds-based workouts",
    )
    rounds_to_score: int = Field(
        default=1,
        ge=1,
        description="Rounds that count towards the score",
    )
    tiebreak_scheme: TiebreakScheme | None = Field(
        default=None,
        description="Tiebreaker scoring method",
    )
    secondary_scheme: SecondaryScheme | None = Field(
        default=None,
        description="Secondary scoring scheme",
    )

    def to_dict(self) -> dict:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True)


class WodAnalysis(BaseModel):
    """Free-form analysis of a WOD."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    movements: list[str] = Field(default_factory=list)
    difficulty: Difficulty = "intermediate"
    estimated_time: str = "Unknown"
    equipment: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True)
