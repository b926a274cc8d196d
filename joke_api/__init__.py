"""
Joke API.

A small HTTP service that tells jokes through a remote conversational agent
and traces every agent run with OpenTelemetry.
"""

__version__ = "1.0.0"
