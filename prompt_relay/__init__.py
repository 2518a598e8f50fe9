"""
Prompt Relay: forwards prompts to Gemini and relays the parsed JSON reply.
"""

__version__ = "1.0.0"
