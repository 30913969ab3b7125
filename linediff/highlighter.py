"""Highlight deleted and inserted lines back onto the flat text."""

from __future__ import annotations

import html
from dataclasses import dataclass
from enum import Enum
from itertools import groupby

from linediff.differ import DiffResult, OperationKind, split_lines


class Side(str, Enum):
    """Which input text is being rendered."""

    ORIGINAL = "original"
    REVISED = "revised"


# The operation kind highlighted on each side
SIDE_KINDS = {
    Side.ORIGINAL: OperationKind.DELETE,
    Side.REVISED: OperationKind.INSERT,
}


@dataclass(frozen=True)
class HighlightedLine:
    """A line of one side, flagged if it was deleted or inserted."""

    number: int  # 1-indexed
    text: str
    highlighted: bool
    padding: bool = False


@dataclass(frozen=True)
class SideBySideRow:
    """Original and revised lines sharing a row number."""

    number: int
    original: HighlightedLine
    revised: HighlightedLine


class _LineFlagger:
    """Decide whether a line of one side is highlighted.

    By default lines are matched by text against the side's operations, so a
    line that is unchanged in one place and deleted elsewhere is flagged in
    both places. With ``by_position`` the index recorded during alignment is
    used instead.
    """

    def __init__(self, result: DiffResult, side: Side, by_position: bool) -> None:
        kind = SIDE_KINDS[side]
        ops = [op for op in result if op.kind is kind]
        self.by_position = by_position
        self._texts = {op.text for op in ops}
        if side is Side.ORIGINAL:
            self._indices = {op.original_index for op in ops}
        else:
            self._indices = {op.revised_index for op in ops}

    def __call__(self, index: int, text: str, padding: bool = False) -> bool:
        if self.by_position:
            return not padding and index in self._indices
        return text in self._texts


def highlight_lines(
    flat_text: str,
    result: DiffResult,
    side: Side,
    by_position: bool = False,
) -> list[HighlightedLine]:
    """Split one side's text into lines flagged against the diff result."""
    is_flagged = _LineFlagger(result, side, by_position)
    return [
        HighlightedLine(number=index + 1, text=line, highlighted=is_flagged(index, line))
        for index, line in enumerate(split_lines(flat_text))
    ]


def render_highlighted(
    flat_text: str,
    result: DiffResult,
    side: Side,
    marker: str = "mark",
    by_position: bool = False,
) -> str:
    """Render one side as HTML, wrapping each run of flagged lines in ``marker``."""
    chunks = []
    lines = highlight_lines(flat_text, result, side, by_position=by_position)
    for highlighted, run in groupby(lines, key=lambda line: line.highlighted):
        body = "\n".join(html.escape(line.text, quote=False) for line in run)
        chunks.append(f"<{marker}>{body}</{marker}>" if highlighted else body)
    return "\n".join(chunks)


def side_by_side(
    original_text: str,
    revised_text: str,
    result: DiffResult,
    by_position: bool = False,
) -> list[SideBySideRow]:
    """Pair original and revised lines by row, padding the shorter side."""
    original_lines = split_lines(original_text)
    revised_lines = split_lines(revised_text)
    original_flag = _LineFlagger(result, Side.ORIGINAL, by_position)
    revised_flag = _LineFlagger(result, Side.REVISED, by_position)

    def make_line(lines: list[str], index: int, is_flagged: _LineFlagger) -> HighlightedLine:
        padding = index >= len(lines)
        text = "" if padding else lines[index]
        return HighlightedLine(
            number=index + 1,
            text=text,
            highlighted=is_flagged(index, text, padding),
            padding=padding,
        )

    return [
        SideBySideRow(
            number=index + 1,
            original=make_line(original_lines, index, original_flag),
            revised=make_line(revised_lines, index, revised_flag),
        )
        for index in range(max(len(original_lines), len(revised_lines)))
    ]
