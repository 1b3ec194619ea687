"""Timed lyrics markup parser.

Parses TTML-style lyrics documents into paragraphs, lines and timed
segments. Only the subset used for song lyrics is recognized:

    <tt> <body> <div itunes:songPart="Verse">      -> paragraph
                  <p>                               -> line
                    <span begin="1.0" end="1.4">    -> timed segment
                      <span ...>                    -> background vocals

Element and attribute names are matched on their local name, so any
namespace prefix works. Unknown elements are skipped.

The document is read through a pull-style event stream over expat and
fed to an explicit state machine. Malformed markup ends the parse early:
paragraphs that were already closed are still returned and no exception
escapes `LyricsParser.parse`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple
from xml.parsers import expat

from timed_lyrics.config import ParserSettings
from timed_lyrics.logging import get_logger
from timed_lyrics.lyrics.timecode import resolve_span_times
from timed_lyrics.lyrics.tokens import TokenBuffer, normalize_text
from timed_lyrics.models.lyrics import LyricLine, LyricParagraph, LyricSegment

logger = get_logger(__name__)


class EventKind(str, Enum):
    """Kinds of markup events produced by the tokenizer."""

    START = "start"
    END = "end"
    TEXT = "text"


class MarkupEvent(NamedTuple):
    """A single tokenizer event.

    `attributes` is only set for START events, `text` only for TEXT events.
    """

    kind: EventKind
    name: str = ""
    attributes: dict[str, str] | None = None
    text: str = ""


def iter_markup_events(data: bytes, chunk_size: int = 4096) -> Iterator[MarkupEvent]:
    """Tokenize a UTF-8 markup document into a stream of events.

    The document is fed to expat chunk by chunk and the events collected
    for each chunk are yielded before the next one is fed. Character data
    for one run of text may arrive as several TEXT events.

    Args:
        data: UTF-8 encoded document
        chunk_size: Bytes fed to expat per step

    Yields:
        MarkupEvent in document order

    Raises:
        expat.ExpatError: After yielding every event that preceded the error
    """
    pending: list[MarkupEvent] = []

    tokenizer = expat.ParserCreate(encoding="UTF-8")
    tokenizer.StartElementHandler = lambda name, attrs: pending.append(
        MarkupEvent(EventKind.START, name, attrs)
    )
    tokenizer.EndElementHandler = lambda name: pending.append(MarkupEvent(EventKind.END, name))
    tokenizer.CharacterDataHandler = lambda text: pending.append(
        MarkupEvent(EventKind.TEXT, text=text)
    )

    chunks = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]
    chunks.append(b"")

    for index, chunk in enumerate(chunks):
        is_final = index == len(chunks) - 1
        try:
            tokenizer.Parse(chunk, is_final)
        except expat.ExpatError:
            yield from pending
            raise
        yield from pending
        pending.clear()


def local_name(qualified_name: str) -> str:
    """Strip any namespace prefix from an element or attribute name."""
    return qualified_name.rsplit(":", 1)[-1]


def get_attribute(attributes: dict[str, str], name: str) -> str | None:
    """Look up an attribute by local name, ignoring its prefix."""
    if name in attributes:
        return attributes[name]
    for key, value in attributes.items():
        if local_name(key) == name:
            return value
    return None


class ElementKind(str, Enum):
    """Elements the parser gives meaning to."""

    SECTION = "div"
    LINE = "p"
    SPAN = "span"
    OTHER = "other"

    @classmethod
    def from_name(cls, qualified_name: str) -> "ElementKind":
        name = local_name(qualified_name)
        for kind in (cls.SECTION, cls.LINE, cls.SPAN):
            if kind.value == name:
                return kind
        return cls.OTHER


class ParsePhase(str, Enum):
    """Where the parser currently is in the document."""

    IDLE = "idle"
    IN_SECTION = "in_section"
    IN_LINE = "in_line"
    IN_SPAN = "in_span"


@dataclass
class SectionFrame:
    song_part: str | None
    lines: list[LyricLine] = field(default_factory=list)


@dataclass
class LineFrame:
    tokens: TokenBuffer = field(default_factory=TokenBuffer)
    # One slot per span in start-tag order; empty spans leave None behind
    segment_slots: list[LyricSegment | None] = field(default_factory=list)

    def reserve_slot(self) -> int:
        self.segment_slots.append(None)
        return len(self.segment_slots) - 1

    def segments(self) -> list[LyricSegment]:
        return [segment for segment in self.segment_slots if segment is not None]


@dataclass
class SpanFrame:
    begin: str | None
    end: str | None
    line: LineFrame | None
    slot: int | None
    text_parts: list[str] = field(default_factory=list)


@dataclass
class OtherFrame:
    name: str


Frame = SectionFrame | LineFrame | SpanFrame | OtherFrame


@dataclass
class ParseState:
    """Mutable state of a single parse.

    Attributes:
        paragraphs: Paragraphs closed so far, in document order
        stack: Open elements, innermost last
        loose_lines: Lines closed outside any section
        text_buffer: Character data received since the last tag event
    """

    paragraphs: list[LyricParagraph] = field(default_factory=list)
    stack: list[Frame] = field(default_factory=list)
    loose_lines: list[LyricLine] = field(default_factory=list)
    text_buffer: list[str] = field(default_factory=list)

    @property
    def phase(self) -> ParsePhase:
        for frame in reversed(self.stack):
            if isinstance(frame, SpanFrame):
                return ParsePhase.IN_SPAN
            if isinstance(frame, LineFrame):
                return ParsePhase.IN_LINE
            if isinstance(frame, SectionFrame):
                return ParsePhase.IN_SECTION
        return ParsePhase.IDLE

    def innermost(self, frame_type: type) -> Frame | None:
        for frame in reversed(self.stack):
            if isinstance(frame, frame_type):
                return frame
        return None

    def flush_loose_lines(self) -> None:
        if self.loose_lines:
            self.paragraphs.append(LyricParagraph(lines=list(self.loose_lines)))
            self.loose_lines.clear()


class LyricsParser:
    """Parser for timed lyrics markup.

    A parser holds only its settings; each `parse` call works on a fresh
    `ParseState`, so one instance can serve any number of documents.

    Example usage:
        parser = LyricsParser()
        for paragraph in parser.parse(ttml):
            for line in paragraph.lines:
                print(line.text)
    """

    def __init__(self, settings: ParserSettings | None = None):
        """Initialize the parser.

        Args:
            settings: Parser settings (defaults if omitted)
        """
        self.settings = settings or ParserSettings()

    def parse(self, markup: str | bytes) -> list[LyricParagraph]:
        """Parse a lyrics document.

        Args:
            markup: TTML document as text or UTF-8 bytes

        Returns:
            Paragraphs in document order. Empty for empty or undecodable
            input; only the paragraphs closed before the error for
            malformed markup.
        """
        if isinstance(markup, bytes):
            try:
                markup = markup.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"Lyrics markup is not valid UTF-8: {e.reason}")
                return []

        if not markup.strip():
            return []

        try:
            data = markup.encode("utf-8")
        except UnicodeEncodeError as e:
            logger.warning(f"Lyrics markup cannot be encoded as UTF-8: {e.reason}")
            return []

        state = ParseState()
        try:
            for event in iter_markup_events(data, self.settings.chunk_size):
                self._handle_event(state, event)
        except expat.ExpatError as e:
            logger.warning(
                f"Malformed lyrics markup, keeping {len(state.paragraphs)} closed paragraphs",
                extra={"error": expat.ErrorString(e.code), "line": e.lineno, "column": e.offset},
            )
            return state.paragraphs

        state.flush_loose_lines()

        logger.debug(
            "Parsed lyrics markup",
            extra={
                "paragraphs": len(state.paragraphs),
                "lines": sum(len(p.lines) for p in state.paragraphs),
            },
        )
        return state.paragraphs

    def _handle_event(self, state: ParseState, event: MarkupEvent) -> None:
        if event.kind is EventKind.TEXT:
            state.text_buffer.append(event.text)
            return

        # A run of text is complete once any tag follows it
        self._flush_text(state)

        if event.kind is EventKind.START:
            self._start_element(state, event.name, event.attributes or {})
        else:
            self._end_element(state)

    def _flush_text(self, state: ParseState) -> None:
        if not state.text_buffer:
            return

        chunk = "".join(state.text_buffer)
        state.text_buffer.clear()

        phase = state.phase
        if phase is ParsePhase.IN_SPAN:
            span = state.innermost(SpanFrame)
            span.text_parts.append(chunk)
            if span.line is not None:
                span.line.tokens.feed(chunk)
        elif phase is ParsePhase.IN_LINE:
            state.innermost(LineFrame).tokens.feed(chunk)

    def _start_element(self, state: ParseState, name: str, attributes: dict[str, str]) -> None:
        kind = ElementKind.from_name(name)

        if kind is ElementKind.SECTION:
            if state.phase is ParsePhase.IDLE:
                state.flush_loose_lines()
            state.stack.append(SectionFrame(song_part=get_attribute(attributes, "songPart")))

        elif kind is ElementKind.LINE:
            state.stack.append(LineFrame())

        elif kind is ElementKind.SPAN:
            line = state.innermost(LineFrame)
            state.stack.append(
                SpanFrame(
                    begin=get_attribute(attributes, "begin"),
                    end=get_attribute(attributes, "end"),
                    line=line,
                    slot=line.reserve_slot() if line is not None else None,
                )
            )

        else:
            state.stack.append(OtherFrame(name))

    def _end_element(self, state: ParseState) -> None:
        frame = state.stack.pop()

        if isinstance(frame, SpanFrame):
            text = normalize_text("".join(frame.text_parts))
            if text and frame.line is not None:
                start_time, end_time = resolve_span_times(frame.begin, frame.end)
                frame.line.segment_slots[frame.slot] = LyricSegment(
                    text=text,
                    start_time=start_time,
                    end_time=end_time,
                )

        elif isinstance(frame, LineFrame):
            line = LyricLine(
                text=frame.tokens.assemble(self.settings.respect_source_spacing),
                segments=frame.segments(),
            )
            section = state.innermost(SectionFrame)
            if section is not None:
                section.lines.append(line)
            else:
                state.loose_lines.append(line)

        elif isinstance(frame, SectionFrame):
            state.paragraphs.append(
                LyricParagraph(lines=frame.lines, song_part=frame.song_part)
            )
