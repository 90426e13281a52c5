"""Utility functions for tranxhistory."""

from tranxhistory.utils.date_parser import day_bounds, parse_date, parse_moment

__all__ = ["day_bounds", "parse_date", "parse_moment"]
