"""
Eliza Responder - Rule-based conversational responder
=====================================================

Reads a line of text, finds the first rule group with a matching
pattern, and answers with one of that group's response templates filled
in with the captured text.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"
