"""
Response formatting.

Normalizes spacing in composed mentor responses: emoji-prefixed headers,
bullet markers and numbered-list markers. Applied once to the final text.
"""

import re

HEADER_EMOJI = "🎯🌟💡📊✨🎓💪🔥⚡📚🎥🧠💬"

_HEADER_PATTERN = re.compile(r"\n{2,}([" + HEADER_EMOJI + r"])[ \t]*")
_BULLET_PATTERN = re.compile(r"\n•[ \t]*")
_NUMBERED_PATTERN = re.compile(r"\n(\d+\.)[ \t]*(?=\S)")


def format_response(text: str) -> str:
    """
    Normalize marker spacing in a composed response.

    - Headers starting with one of the section emoji get exactly one blank
      line before them and one space after the emoji.
    - Bullets ("•") and numbered items ("1.") get exactly one space after
      the marker.

    Idempotent: formatting an already formatted string is a no-op.
    """
    formatted = _HEADER_PATTERN.sub(lambda m: f"\n\n{m.group(1)} ", text)
    formatted = _BULLET_PATTERN.sub("\n• ", formatted)
    formatted = _NUMBERED_PATTERN.sub(lambda m: f"\n{m.group(1)} ", formatted)
    return formatted.strip()
