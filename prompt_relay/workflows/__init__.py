"""
Request handling workflows.
"""

from .prompt_relay import PromptRelayHandler, parse_prompt_request

__all__ = [
    "PromptRelayHandler",
    "parse_prompt_request"
]
