"""Credential redaction for command lines and diagnostics."""

import re
from typing import Iterable

PLACEHOLDER = "***"

# Order matters: structural patterns run before literal secrets.
_STRUCTURAL = (
    (re.compile(r"-U\s+\S+"), f"-U {PLACEHOLDER}"),
    (re.compile(r"-A\s+\S+"), f"-A {PLACEHOLDER}"),
    (re.compile(r"\\\\[^\\\s]+\\\S*"), f"\\\\{PLACEHOLDER}"),
    (re.compile(r"//[^/\s]+/\S*"), f"//{PLACEHOLDER}"),
)


def redact(text: str, secrets: Iterable[str] = ()) -> str:
    """Mask auth tokens, UNC paths, and every literal occurrence of ``secrets``.

    The result never contains any non-empty secret.
    """
    if not text:
        return text

    for pattern, replacement in _STRUCTURAL:
        text = pattern.sub(replacement, text)

    literals = sorted({s for s in secrets if s}, key=len, reverse=True)
    if not literals:
        return text

    text = re.sub("|".join(re.escape(s) for s in literals), PLACEHOLDER, text)

    # a secret can reappear inside or across the placeholder; strip until gone
    while any(s in text for s in literals):
        for s in literals:
            text = text.replace(s, "")

    return text
