"""
Processors that turn upstream results into relayed responses.
"""

from .response_processor import extract_candidate_text, parse_generated_json

__all__ = [
    "extract_candidate_text",
    "parse_generated_json"
]
