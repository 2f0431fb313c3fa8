"""
Chat command parser.

A command line looks like ``@ha <action> <target> [ignored...]``: the marker
at the very start, one whitespace character, a word, one whitespace
character, a word. Anything else is ordinary chat and is left alone.
"""

import logging
import string
from typing import Union

from talk_ha_bot.models.message import Command

DEFAULT_MARKER = "@ha"

# ASCII only: accented letters or a non-breaking space never form a command
WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")
SEPARATORS = frozenset(" \t\n\f\r")

logger = logging.getLogger(__name__)


class NoMatch:
    """Parser result for text that is not a command."""

    __slots__ = ("reason", "text")

    NO_TRIGGER = "no_trigger"
    TOO_FEW_TOKENS = "too_few_tokens"

    def __init__(self, reason: str, text: str):
        self.reason = reason
        self.text = text

    def __repr__(self) -> str:
        return f"NoMatch(reason={self.reason!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoMatch) and other.reason == self.reason and other.text == self.text


ParseResult = Union[Command, NoMatch]


def _is_word_char(ch: str) -> bool:
    return ch in WORD_CHARS


def _scan_word(text: str, pos: int) -> int:
    """Return the index just past the word starting at pos (pos if there is none)."""
    end = pos
    while end < len(text) and _is_word_char(text[end]):
        end += 1
    return end


def matches_trigger(text: str, marker: str = DEFAULT_MARKER) -> bool:
    if not text.startswith(marker):
        return False
    pos = len(marker)
    for _ in range(2):
        if pos >= len(text) or text[pos] not in SEPARATORS:
            return False
        end = _scan_word(text, pos + 1)
        if end == pos + 1:
            return False
        pos = end
    return True


def tokenize(text: str) -> list[str]:
    return text.split()


def parse_command(text: str, marker: str = DEFAULT_MARKER) -> ParseResult:
    if not matches_trigger(text, marker):
        logger.info("Message is not a command: %s", text)
        return NoMatch(NoMatch.NO_TRIGGER, text)

    tokens = tokenize(text)
    if len(tokens) < 3:
        logger.info("Command doesn't contain an action and a target: %s", text)
        return NoMatch(NoMatch.TOO_FEW_TOKENS, text)

    logger.info("Command found: %s", text)
    return Command(action=tokens[1], target=tokens[2])
