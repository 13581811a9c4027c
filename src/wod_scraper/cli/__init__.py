"""
CLI module for the WOD scraper.

Provides command-line interface using Typer:
- extract: Extract the WOD from a saved page
- url: Print the WOD page URL for a date
- scrape: Scrape, structure and schedule a day's WOD
- schedule: List a team's scheduled workouts
- track: List a programming track's workouts
- config: Configuration management
"""

from wod_scraper.cli.main import app

__all__ = ["app"]
