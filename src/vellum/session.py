"""Per-pass render state.

Everything that is not local to a single node lives here: the current
table's column alignments, collected footnote definitions, the search
match count and the last-modified marker handle.

Thread Safety:
    A ``RenderSession`` is created fresh for each top-level render and
    discarded afterwards. No tracker is shared between passes; the only
    state that outlives a pass belongs to the caller's collaborators.
"""

from dataclasses import dataclass, field

from vellum.nodes import FootnoteDef, TableAlign
from vellum.output import Element

LAST_MODIFIED_CLASS = "last-modified-marker"


@dataclass(slots=True)
class TableAlignTracker:
    """Column alignment of the table being rendered.

    Only one table is current at a time. A nested or following table simply
    replaces the state when it is entered, and leaving a table does not
    restore anything.
    """

    aligns: tuple[TableAlign, ...] = ()
    index: int = 0
    active: bool = False

    def enter_table(self, aligns: tuple[TableAlign, ...]) -> None:
        self.aligns = tuple(aligns)
        self.index = 0
        self.active = True

    def enter_row(self) -> None:
        self.index = 0

    def next_column_align(self) -> TableAlign:
        """Alignment of the cell at the cursor, then advance the cursor.

        Returns None outside the declared alignments or when no table is
        active. The cursor advances either way.
        """
        align = self.aligns[self.index] if self.index < len(self.aligns) else None
        self.index += 1
        return align


@dataclass(slots=True)
class FootnoteCollector:
    """Footnote definitions in encounter order."""

    definitions: list[FootnoteDef] = field(default_factory=list)

    def collect(self, definition: FootnoteDef) -> None:
        self.definitions.append(definition)

    def __len__(self) -> int:
        return len(self.definitions)


@dataclass(slots=True)
class MatchCounter:
    """Number of distinct search match spans seen in a pass."""

    count: int = 0

    def increment(self) -> None:
        self.count += 1


@dataclass(slots=True)
class LastModifiedMarker:
    """Handle to the most recently created last-modified marker.

    Every created marker stays in the output tree; only the last one is
    reachable through ``handle``.
    """

    handle: Element | None = None

    def create(self) -> Element:
        marker = Element("span", {"class": LAST_MODIFIED_CLASS})
        self.handle = marker
        return marker


@dataclass(slots=True)
class RenderSession:
    """All trackers owned by a single render pass."""

    tables: TableAlignTracker = field(default_factory=TableAlignTracker)
    footnotes: FootnoteCollector = field(default_factory=FootnoteCollector)
    matches: MatchCounter = field(default_factory=MatchCounter)
    last_modified: LastModifiedMarker = field(default_factory=LastModifiedMarker)
