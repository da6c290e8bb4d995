"""Lexical scanning over raw SQL text.

Probe-and-skip helpers that let the text-level checks walk a document
character by character without tripping over string literals or comments,
plus the small word and naming-convention predicates those checks share.

Every probe takes ``(text, position)`` and returns ``(matched, position)``.
When ``matched`` is true the returned position is the closing quote of a
string, the closing ``/`` of a block comment, or the line delimiter ending
a single-line comment, so the caller's usual ``+ 1`` lands just past it.
Unterminated strings and comments run silently to the end of the text.
"""

from __future__ import annotations

from typing import Iterator

QUOTES = ("'", '"')
LINE_COMMENT_MARKERS = ("--", "//", "#")

_BLANKS = frozenset(" \t\n\r")
_WORD_STOPS = frozenset(" \t\n\r;(,")


# ---------------------------------------------------------------------------
# Strings and comments
# ---------------------------------------------------------------------------


def _is_escaped(text: str, position: int) -> bool:
    """Return True if ``text[position]`` follows an odd run of backslashes."""
    backslashes = 0
    i = position - 1
    while i >= 0 and text[i] == "\\":
        backslashes += 1
        i -= 1
    return backslashes % 2 == 1


def skip_string(text: str, position: int) -> tuple[bool, int]:
    """Skip the quoted string literal opening at *position*, if any.

    The literal ends at the next unescaped occurrence of the same quote
    character.
    """
    if position >= len(text) or text[position] not in QUOTES:
        return False, position

    quote = text[position]
    for i in range(position + 1, len(text)):
        if text[i] == quote and not _is_escaped(text, i):
            return True, i
    return True, len(text) - 1


def _block_comment_body(text: str, position: int) -> int | None:
    """Return where the body of a ``/*`` comment at *position* begins.

    The opener is recognized both when *position* is on its ``/`` and when
    *position* is on its ``*``.  A ``/`` that closes a previous ``*/`` does
    not open a comment.
    """
    if text.startswith("/*", position):
        return position + 2
    if position >= 1 and text.startswith("/*", position - 1):
        if position < 2 or text[position - 2] != "*":
            return position + 1
    return None


def line_comment_marker(text: str, position: int) -> str | None:
    """Return the single-line comment marker starting at *position*, if any."""
    for marker in LINE_COMMENT_MARKERS:
        if text.startswith(marker, position):
            return marker
    return None


def _in_line_comment_marker(text: str, position: int) -> bool:
    if line_comment_marker(text, position) is not None:
        return True
    # Second character of a two-character marker, unless the first one
    # closes a block comment.
    if position < 1 or text[position - 1 : position + 1] not in ("--", "//"):
        return False
    return position < 2 or text[position - 2 : position] != "*/"


def skip_comment(
    text: str,
    position: int,
    delimiter: str = "\n",
    allow_single_line: bool = True,
) -> tuple[bool, int]:
    """Skip the comment opening at *position*, if any.

    Block comments are skipped through their closing ``*/``.  When
    *allow_single_line* is set, ``--``, ``//`` and ``#`` comments are skipped
    up to, but not including, the next *delimiter*.
    """
    body = _block_comment_body(text, position)
    if body is not None:
        close = text.find("*/", body)
        if close == -1:
            return True, len(text) - 1
        return True, close + 1

    if allow_single_line and _in_line_comment_marker(text, position):
        end = text.find(delimiter, position)
        return True, len(text) if end == -1 else end

    return False, position


def iter_code(text: str, delimiter: str = "\n") -> Iterator[int]:
    """Yield every position of *text* that lies outside strings and comments."""
    i = 0
    while i < len(text):
        matched, end = skip_comment(text, i, delimiter)
        if not matched:
            matched, end = skip_string(text, i)
        if matched:
            i = end + 1
            continue
        yield i
        i += 1


def iter_line_comments(text: str, delimiter: str = "\n") -> Iterator[tuple[int, str, int]]:
    """Yield ``(start, marker, end)`` for each single-line comment.

    Comment markers inside strings or block comments are not comments.
    ``end`` is the index of the delimiter closing the comment, or
    ``len(text)`` on the last line.
    """
    i = 0
    while i < len(text):
        matched, end = skip_comment(text, i, delimiter, allow_single_line=False)
        if not matched:
            matched, end = skip_string(text, i)
        if matched:
            i = end + 1
            continue

        marker = line_comment_marker(text, i)
        if marker is None:
            i += 1
            continue

        end = text.find(delimiter, i)
        if end == -1:
            end = len(text)
        yield i, marker, end
        i = end + 1


# ---------------------------------------------------------------------------
# Words
# ---------------------------------------------------------------------------


def skip_spaces_backward(text: str, position: int) -> int:
    """Return the last non-blank position at or before *position* (``-1`` if none)."""
    while position >= 0 and text[position] in _BLANKS:
        position -= 1
    return position


def next_word(text: str, position: int) -> tuple[str, int]:
    """Read the word starting at or after *position* on the same line.

    Leading spaces and tabs are skipped.  The word ends at whitespace, ``;``,
    ``(`` or ``,``.  Returns the word and the position just past it.
    """
    while position < len(text) and text[position] in " \t":
        position += 1
    start = position
    while position < len(text) and text[position] not in _WORD_STOPS:
        position += 1
    return text[start:position], position


def previous_word(text: str, position: int) -> tuple[str, int]:
    """Read the identifier-like word that ends before *position*.

    Blanks between the word and *position* are skipped.  Returns the word and
    its start offset, or ``("", -1)`` when the preceding character is not
    part of a word.
    """
    end = skip_spaces_backward(text, position - 1)
    start = end
    while start >= 0 and (text[start].isalnum() or text[start] == "_"):
        start -= 1
    if start == end:
        return "", -1
    return text[start + 1 : end + 1], start + 1


# ---------------------------------------------------------------------------
# Naming conventions
# ---------------------------------------------------------------------------


def _is_upper(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_lower(ch: str) -> bool:
    return "a" <= ch <= "z"


def is_upper_camel_case(name: str) -> bool:
    if name and not _is_upper(name[0]):
        return False
    return "_" not in name


def is_lower_camel_case(name: str) -> bool:
    if name and not _is_lower(name[0]):
        return False
    return "_" not in name


def is_all_caps(name: str) -> bool:
    return not any(_is_lower(ch) for ch in name)


def is_lower_snake_case(name: str) -> bool:
    return not any(_is_upper(ch) for ch in name)


_STATEMENT_HEADS = frozenset({"CREATE", "IMPORT"})
_HEADER_TAILS = frozenset({"FUNCTION", "EXISTS", "TABLE", "TYPE", "VIEW", "=", "PROTO", "MODULE"})


def is_one_line_statement(line: str) -> bool:
    """Return True if *line* is a statement header that cannot be wrapped.

    Matches ``CREATE ...`` / ``IMPORT ...`` lines that stop at most one word
    after their object keyword (``TABLE``, ``FUNCTION``, ``MODULE``, ...), or
    right after an ``=``.  Such lines are exempt from the length limit.
    """
    words = [word for word in line.split(" ") if word]
    if not words or words[0].upper() not in _STATEMENT_HEADS:
        return False

    seen_tail = False
    finished = False
    for word in words[1:]:
        if finished:
            return False
        upper = word.upper()
        if seen_tail:
            finished = True
            continue
        if upper in _HEADER_TAILS:
            seen_tail = True
            finished = upper == "="
    return True
