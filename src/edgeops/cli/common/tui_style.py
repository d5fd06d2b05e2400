"""Questionary / prompt_toolkit theme for edge-ops prompts.

Destructive confirmations are the only interactive prompts; they share one
style so they stand out from regular output.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_CONFIRM = Style.from_dict(
    {
        "qmark": "bold ansired",
        "question": "bold ansired",
        "answer": "bold ansiyellow",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
    }
)
