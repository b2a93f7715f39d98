"""
Text processing utilities shared by the analyzers.

All helpers that report positions work on the text exactly as given, so that
offsets stay valid against the caller's source string.
"""

import re
from typing import Iterator, Tuple

WORD_PATTERN = re.compile(r"[A-Za-z]+")
SENTENCE_PATTERN = re.compile(r"[^.!?\n]+[.!?]*")


def normalize_whitespace(text: str) -> str:
    """
    Replace tabs and carriage returns with spaces, one character for one.

    Offsets computed on the result are valid for the input.

    Example:
        >>> normalize_whitespace("a\\tb\\r\\n")
        'a b \\n'
    """
    return text.replace("\t", " ").replace("\r", " ")


def iter_words(text: str) -> Iterator[Tuple[str, int, int]]:
    """
    Yield (word, start, end) for every run of ASCII letters.

    Apostrophes and hyphens split tokens, so "recieve's" and "recieve-and-ship"
    both yield "recieve" with its own offsets.
    """
    for match in WORD_PATTERN.finditer(text):
        yield match.group(0), match.start(), match.end()


def count_words(text: str) -> int:
    """Whitespace-token word count."""
    return len(text.split())


def iter_sentences(text: str) -> Iterator[Tuple[str, int, int]]:
    """
    Yield (sentence, start, end) for each non-blank sentence.

    Sentences end at terminal punctuation or a line break. The yielded span
    excludes surrounding whitespace.
    """
    for match in SENTENCE_PATTERN.finditer(text):
        raw = match.group(0)
        stripped = raw.strip()
        if not stripped or not re.search(r"\w", stripped):
            continue
        start = match.start() + (len(raw) - len(raw.lstrip()))
        yield stripped, start, start + len(stripped)


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."


def match_case(template: str, replacement: str) -> str:
    """Apply the capitalization of template to replacement."""
    if template.isupper() and len(template) > 1:
        return replacement.upper()
    if template[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement
