"""
MindMate Relay - backend service for a chat-based wellness companion.

This package relays user messages to an LLM under a fixed safety-oriented
system prompt, and persists and summarizes mood check-ins.
"""

__version__ = "0.1.0"
