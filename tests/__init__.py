"""
Test suite for the WOD scraper.

Provides tests for all modules:
- Unit tests for extraction, fetching, structuring and storage
- Pipeline and CLI tests wiring them together
- Fixtures for common test data
"""
