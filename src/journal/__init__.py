"""
Journal module for AI-generated summaries.

This module provides functionality for:
- Weekly review reports
- Series conclusion articles
- Automatic category suggestion
"""

from src.journal.summarizer import SummaryRequester, parse_category, suggest_text

__all__ = ["SummaryRequester", "parse_category", "suggest_text"]
