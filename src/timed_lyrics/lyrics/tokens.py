"""Token accumulation and line text assembly.

Lyrics markup is inconsistent about where the space between two words
lives: sometimes between tags, sometimes nowhere at all. Text is therefore
collected as normalized word tokens and the spacing is decided when the
line is assembled.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Tokens starting with one of these attach to the previous token
CLOSING_PUNCTUATION = ",.!?:;)]}"

# Continuation letters of apostrophized French/Romance elisions, which some
# documents split off the preceding letter ("o" + "ù", "l" + "à")
ACCENTED_START_CHARS = frozenset(
    "àâäáéèêëíîïóôöòúùûüÿñçœæ"
    "ÀÂÄÁÉÈÊËÍÎÏÓÔÖÒÚÙÛÜŸÑÇŒÆ"
)


def normalize_text(chunk: str) -> str:
    """Collapse whitespace runs to a single space and trim the ends."""
    return " ".join(chunk.split())


def is_blank(chunk: str) -> bool:
    """Check whether a chunk is empty or consists only of whitespace."""
    return not chunk or chunk.isspace()


def is_single_ascii_letter(text: str) -> bool:
    return len(text) == 1 and text.isascii() and text.isalpha()


def should_suppress_space(previous: str, following: str) -> bool:
    """Decide whether two adjacent tokens are joined without a space.

    Args:
        previous: Text of the earlier token
        following: Text of the later token

    Returns:
        True for closing punctuation, or for a single ASCII letter followed
        by a single accented continuation letter
    """
    if not following:
        return False

    if following[0] in CLOSING_PUNCTUATION:
        return True

    return (
        is_single_ascii_letter(previous)
        and len(following) == 1
        and following in ACCENTED_START_CHARS
    )


@dataclass(frozen=True)
class Token:
    """A normalized word collected while a line is parsed.

    Attributes:
        text: Normalized word text, never empty
        needs_leading_space: The source had whitespace between this token
            and the previous one
    """

    text: str
    needs_leading_space: bool = False


@dataclass
class TokenBuffer:
    """Per-line token accumulator."""

    tokens: list[Token] = field(default_factory=list)
    has_pending_whitespace: bool = False

    def __bool__(self) -> bool:
        return bool(self.tokens)

    def mark_whitespace(self) -> None:
        self.has_pending_whitespace = True

    def feed(self, chunk: str) -> None:
        """Add a raw character-data chunk.

        Whitespace-only chunks only mark pending whitespace. Other chunks
        are normalized and split into word tokens, so spacing inside a
        chunk is decided by the same rules as spacing between elements.

        Args:
            chunk: Raw character data
        """
        if is_blank(chunk):
            if chunk:
                self.mark_whitespace()
            return

        if chunk[0].isspace():
            self.mark_whitespace()

        words = normalize_text(chunk).split(" ")
        self.tokens.append(Token(words[0], self.has_pending_whitespace and bool(self.tokens)))
        self.tokens.extend(Token(word, True) for word in words[1:])

        self.has_pending_whitespace = chunk[-1].isspace()

    def clear(self) -> None:
        self.tokens.clear()
        self.has_pending_whitespace = False

    def assemble(self, respect_source_spacing: bool = False) -> str:
        return assemble_line_text(self.tokens, respect_source_spacing)


def assemble_line_text(tokens: list[Token], respect_source_spacing: bool = False) -> str:
    """Join tokens into display text.

    Each token after the first is preceded by one space unless
    `should_suppress_space` holds for the pair. With
    `respect_source_spacing`, a token that had no whitespace before it in
    the source is also joined directly (syllable-timed documents).

    Args:
        tokens: Tokens in document order
        respect_source_spacing: Honor the absence of source whitespace

    Returns:
        Assembled line text
    """
    parts: list[str] = []
    previous: Token | None = None

    for token in tokens:
        if previous is not None:
            spaced = not should_suppress_space(previous.text, token.text)
            if respect_source_spacing and not token.needs_leading_space:
                spaced = False
            if spaced:
                parts.append(" ")
        parts.append(token.text)
        previous = token

    return "".join(parts)
