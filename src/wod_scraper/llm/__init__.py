"""
LLM module for the WOD scraper.

Provides:
- Workout and analysis models
- Prompt templates
- Anthropic-backed workout generator with fallbacks
"""

from wod_scraper.llm.models import Workout, WodAnalysis
from wod_scraper.llm.prompt_templates import PromptTemplate, WorkoutPrompts
from wod_scraper.llm.workout_generator import (
    WorkoutGenerator,
    fallback_analysis,
    fallback_workout,
    strip_code_fences,
)

__all__ = [
    "Workout",
    "WodAnalysis",
    "PromptTemplate",
    "WorkoutPrompts",
    "WorkoutGenerator",
    "fallback_analysis",
    "fallback_workout",
    "strip_code_fences",
]
