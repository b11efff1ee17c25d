"""Markdown body analysis.

Scans document bodies for fenced code blocks and estimates reading time from
prose word counts. Blocks are located with markdown-it's CommonMark parser, so
fences nested in list items and blockquotes are found too. Code samples are
treated as opaque text: they are located and labelled, never executed.
"""

import math
import re
from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.token import Token

_md = MarkdownIt("commonmark", {"html": True})

_WORD_RE = re.compile(r"[A-Za-z0-9]+(?:['’-][A-Za-z0-9]+)*")

# Numbers may be decimal ("1.5 hours"); units may run together ("1h30m")
_NUMBER = r"(?<![\d.])(\d+(?:\.\d+)?)\s*"
_HOURS_RE = re.compile(_NUMBER + r"(?:hours|hour|hrs|hr|h)(?![a-z])", re.IGNORECASE)
_MINUTES_RE = re.compile(_NUMBER + r"(?:minutes|minute|mins|min|m)(?![a-z])", re.IGNORECASE)

DEFAULT_WORDS_PER_MINUTE = 200


@dataclass(frozen=True)
class CodeFence:
    """A fenced code block in a document body.

    Attributes:
        char: Fence character ("`" or "~")
        length: Number of fence characters in the opening line
        language: First word of the info string ("" if none)
        start_line: 1-based body line of the opening fence
        end_line: 1-based body line of the closing fence (None if unterminated)
    """

    char: str
    length: int
    language: str
    start_line: int
    end_line: int | None = None

    @property
    def closed(self) -> bool:
        """True if the block has a closing fence."""
        return self.end_line is not None


def _fence_tokens(body: str) -> list[Token]:
    # A final newline keeps every content line newline-terminated
    if not body.endswith("\n"):
        body += "\n"
    return [token for token in _md.parse(body) if token.type == "fence" and token.map]


def _to_fence(token: Token) -> CodeFence:
    start, end = token.map
    info = token.info.strip()
    language = info.split()[0] if info else ""

    # The mapped range is the opener, the content lines and, when present, the
    # closing fence. An unterminated block runs to the end of its container.
    content_lines = token.content.count("\n")
    closed = end - start == content_lines + 2

    return CodeFence(
        char=token.markup[0],
        length=len(token.markup),
        language=language,
        start_line=start + 1,
        end_line=end if closed else None,
    )


def scan_fences(body: str) -> list[CodeFence]:
    """Find all fenced code blocks in a Markdown body.

    Args:
        body: Markdown text

    Returns:
        Code fences in document order. An unterminated fence runs to the end
        of its container and is returned with end_line=None.
    """
    return [_to_fence(token) for token in _fence_tokens(body)]


def unterminated_fences(body: str) -> list[CodeFence]:
    """Return opening fences that are never closed."""
    return [fence for fence in scan_fences(body) if not fence.closed]


def code_languages(body: str) -> list[str]:
    """Distinct language tags of the body's code samples, in first-seen order."""
    seen: dict[str, None] = {}
    for fence in scan_fences(body):
        if fence.language:
            seen.setdefault(fence.language, None)
    return list(seen)


def prose_lines(body: str) -> list[str]:
    """Body lines that are outside fenced code blocks."""
    inside: set[int] = set()
    for token in _fence_tokens(body):
        start, end = token.map
        inside.update(range(start, end))
    return [line for index, line in enumerate(body.split("\n")) if index not in inside]


def word_count(body: str) -> int:
    """Count prose words, ignoring the contents of fenced code blocks."""
    return sum(len(_WORD_RE.findall(line)) for line in prose_lines(body))


def estimate_read_time(body: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimate reading time in whole minutes (rounded up, at least 1)."""
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute must be positive (got {words_per_minute})")
    return max(1, math.ceil(word_count(body) / words_per_minute))


def parse_read_time(text: str) -> int | None:
    """Extract a duration in minutes from free text.

    Examples:
        >>> parse_read_time("8 min read")
        8
        >>> parse_read_time("1 hour 5 minutes")
        65
        >>> parse_read_time("1.5 hours")
        90
        >>> parse_read_time("quick") is None
        True
    """
    if not text:
        return None

    hours = _HOURS_RE.search(text)
    minutes = _MINUTES_RE.search(text)
    if hours is None and minutes is None:
        return None

    total = 0.0
    if hours is not None:
        total += float(hours.group(1)) * 60
    if minutes is not None:
        total += float(minutes.group(1))
    return round(total)
