"""Utility modules for tree mirror."""

from .formatters import format_gigabytes, format_date, format_summary

__all__ = ["format_gigabytes", "format_date", "format_summary"]
