"""Retrieval and answer generation."""

from .answer import Answer, AnswerPipeline
from .searcher import DefaultSearcher, format_hit

__all__ = [
    "Answer",
    "AnswerPipeline",
    "DefaultSearcher",
    "format_hit",
]
