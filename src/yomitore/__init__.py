"""
yomitore

Terminal reading-comprehension trainer: summarize AI-generated passages and
get them scored by an LLM evaluator.
"""

__version__ = "0.3.0"
