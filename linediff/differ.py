"""Line diff engine for comparing two blocks of text."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

# How many lines past the cursor the aligner scans for a resync point
LOOKAHEAD_WINDOW = 4


class OperationKind(str, Enum):
    """Classification of a single line in the edit script."""

    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


UNIFIED_PREFIXES = {
    OperationKind.INSERT: "+ ",
    OperationKind.DELETE: "- ",
    OperationKind.EQUAL: "  ",
}


@dataclass(frozen=True)
class DiffOperation:
    """One classified line of the edit script."""

    kind: OperationKind
    text: str
    # 0-based positions recorded during alignment; not part of equality
    original_index: int | None = field(default=None, compare=False)
    revised_index: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Statistics:
    """Counts of operations by kind."""

    additions: int = 0
    deletions: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return self.additions + self.deletions + self.unchanged

    @property
    def summary(self) -> str:
        """Generate a human-readable summary."""
        if self.additions == 0 and self.deletions == 0:
            return "No changes"

        parts = []
        if self.additions > 0:
            parts.append(f"+{self.additions} lines")
        if self.deletions > 0:
            parts.append(f"-{self.deletions} lines")

        return ", ".join(parts)


@dataclass(frozen=True)
class DiffResult:
    """Ordered, immutable sequence of diff operations."""

    operations: tuple[DiffOperation, ...] = ()

    def __iter__(self) -> Iterator[DiffOperation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __getitem__(self, index: int) -> DiffOperation:
        return self.operations[index]

    @property
    def statistics(self) -> Statistics:
        return get_statistics(self)

    @property
    def has_changes(self) -> bool:
        return any(op.kind is not OperationKind.EQUAL for op in self.operations)

    def original_text(self) -> str:
        """Rebuild the original text from equal and deleted lines."""
        return "\n".join(op.text for op in self.operations if op.kind is not OperationKind.INSERT)

    def revised_text(self) -> str:
        """Rebuild the revised text from equal and inserted lines."""
        return "\n".join(op.text for op in self.operations if op.kind is not OperationKind.DELETE)

    def inverted(self) -> "DiffResult":
        """Return the result as seen with original and revised swapped."""
        swapped = {
            OperationKind.INSERT: OperationKind.DELETE,
            OperationKind.DELETE: OperationKind.INSERT,
            OperationKind.EQUAL: OperationKind.EQUAL,
        }
        return DiffResult(
            tuple(
                DiffOperation(
                    swapped[op.kind],
                    op.text,
                    original_index=op.revised_index,
                    revised_index=op.original_index,
                )
                for op in self.operations
            )
        )


def split_lines(text: str) -> list[str]:
    """Split text on newlines, tolerating CRLF endings.

    Empty input yields a single empty line, and blank lines are kept.
    """
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _find_ahead(line: str, lines: Sequence[str], start: int, lookahead: int) -> int | None:
    """Index of the first match for ``line`` within ``lookahead`` lines after ``start``."""
    for k in range(start + 1, min(start + lookahead + 1, len(lines))):
        if lines[k] == line:
            return k
    return None


def align(
    original: Sequence[str],
    revised: Sequence[str],
    lookahead: int = LOOKAHEAD_WINDOW,
) -> DiffResult:
    """Align two line sequences with a bounded-lookahead greedy walk.

    When the lines under the cursors differ, the revised side is searched
    first for the current original line (the gap counts as inserted lines),
    then the original side for the current revised line (the gap counts as
    deleted lines). With no match inside the window the pair becomes a
    delete followed by an insert. This is not a minimal edit script.
    """
    ops: list[DiffOperation] = []
    i = j = 0

    while i < len(original) or j < len(revised):
        if i >= len(original):
            ops.append(DiffOperation(OperationKind.INSERT, revised[j], revised_index=j))
            j += 1
        elif j >= len(revised):
            ops.append(DiffOperation(OperationKind.DELETE, original[i], original_index=i))
            i += 1
        elif original[i] == revised[j]:
            ops.append(DiffOperation(OperationKind.EQUAL, original[i], i, j))
            i += 1
            j += 1
        elif (k := _find_ahead(original[i], revised, j, lookahead)) is not None:
            for pos in range(j, k):
                ops.append(DiffOperation(OperationKind.INSERT, revised[pos], revised_index=pos))
            ops.append(DiffOperation(OperationKind.EQUAL, original[i], i, k))
            i += 1
            j = k + 1
        elif (k := _find_ahead(revised[j], original, i, lookahead)) is not None:
            for pos in range(i, k):
                ops.append(DiffOperation(OperationKind.DELETE, original[pos], original_index=pos))
            ops.append(DiffOperation(OperationKind.EQUAL, revised[j], k, j))
            i = k + 1
            j += 1
        else:
            ops.append(DiffOperation(OperationKind.DELETE, original[i], original_index=i))
            ops.append(DiffOperation(OperationKind.INSERT, revised[j], revised_index=j))
            i += 1
            j += 1

    return DiffResult(tuple(ops))


def compute_diff(original: str, revised: str) -> DiffResult:
    """Compute the line diff between two texts.

    An empty text contributes no lines when the other side has content, so
    diffing against nothing gives pure inserts or deletes. Two empty texts
    compare as a single equal empty line.
    """
    original_lines = split_lines(original) if original or not revised else []
    revised_lines = split_lines(revised) if revised or not original else []
    result = align(original_lines, revised_lines)
    logger.debug(f"Aligned {len(result)} operations: {result.statistics.summary}")
    return result


def get_statistics(result: DiffResult) -> Statistics:
    """Count additions, deletions and unchanged lines."""
    counts = dict.fromkeys(OperationKind, 0)
    for op in result:
        counts[op.kind] += 1

    return Statistics(
        additions=counts[OperationKind.INSERT],
        deletions=counts[OperationKind.DELETE],
        unchanged=counts[OperationKind.EQUAL],
    )


def serialize_unified(result: DiffResult) -> str:
    """Render every operation with a +, - or blank prefix, one per line."""
    return "\n".join(f"{UNIFIED_PREFIXES[op.kind]}{op.text}" for op in result)
