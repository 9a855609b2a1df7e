"""Timed multiple-choice quizzes generated from untrusted provider content."""

__version__ = "0.1.0"
