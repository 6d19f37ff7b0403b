"""Normalize raw PDF-extracted text before pattern matching."""

import re

# A lone "n" surrounded by whitespace is a newline escape that lost its backslash
_LITERAL_NEWLINE_ARTIFACT = re.compile(r"\s+n\s+")
_HORIZONTAL_WHITESPACE = re.compile(r"[ \t]+")
_REPEATED_LINE_BREAKS = re.compile(r"(\r\n|\n|\r){2,}")


def normalize_text(text: str) -> str:
    """Return a canonical, trimmed form of extracted text.

    Collapses literal ``n`` newline artifacts into real line breaks, runs of
    spaces/tabs into one space and runs of two or more line breaks into one.
    Total over any string; ``normalize_text(normalize_text(x)) == normalize_text(x)``.
    """
    if not text:
        return ""

    # Repeat until stable: "a n n b" exposes a second artifact after the first pass
    previous = None
    while previous != text:
        previous = text
        text = _LITERAL_NEWLINE_ARTIFACT.sub("\n", text)

    text = _HORIZONTAL_WHITESPACE.sub(" ", text)
    text = _REPEATED_LINE_BREAKS.sub("\n", text)
    return text.strip()
