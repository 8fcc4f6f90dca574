from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
EVENT_KINDS = ("lesson", "note")


class InvalidEventError(ValueError):
    """Raised when an event cannot be laid out (bad time range, missing day, duplicate id)."""


@dataclass(frozen=True)
class CalendarItem:
    """
    One timed event on a single calendar day.

    start_minutes/end_minutes are minutes since local midnight and describe the
    half-open interval [start, end). kind only matters to the templates.
    """
    id: str
    day: date
    start_minutes: int
    end_minutes: int
    kind: str = "lesson"
    title: str = ""
    source: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.day is None:
            raise InvalidEventError(f"Event {self.id!r} has no date.")
        if self.kind not in EVENT_KINDS:
            raise InvalidEventError(f"Event {self.id!r} has unknown kind {self.kind!r}.")
        if not 0 <= self.start_minutes < MINUTES_PER_DAY:
            raise InvalidEventError(
                f"Event {self.id!r} starts at minute {self.start_minutes}, outside the day."
            )
        if self.end_minutes > MINUTES_PER_DAY:
            raise InvalidEventError(
                f"Event {self.id!r} ends at minute {self.end_minutes}, past midnight."
            )
        if self.end_minutes <= self.start_minutes:
            raise InvalidEventError(f"Event {self.id!r} must end after it starts.")

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes


@dataclass(frozen=True)
class LayoutSlot:
    """Column assignment for one event inside its overlap cluster."""
    column: int
    column_count: int


@dataclass(frozen=True)
class GridMetrics:
    """
    How minutes map onto a rendered grid.

    hour_rows=True anchors every block to the hour row it starts in (week grid,
    mobile day grid); otherwise blocks are positioned from start_hour on one
    continuous column.
    """
    hour_height_px: int = 60
    min_height_px: int = 20
    gutter_percent: float = 1.0
    hour_rows: bool = True
    start_hour: int = 0

    @property
    def px_per_minute(self) -> float:
        return self.hour_height_px / 60


@dataclass
class EventBlock:
    """
    A rendered event "block" for the week/day timeline.

    The *_minutes fields come straight from the layout; the *_px and *_percent
    fields are what the templates put into style attributes.
    """
    item: CalendarItem
    slot: LayoutSlot
    row_hour: Optional[int]
    top_offset_minutes: int
    height_minutes: int
    top_px: float
    height_px: float
    left_percent: float
    width_percent: float

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def kind(self) -> str:
        return self.item.kind

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def col(self) -> int:
        return self.slot.column

    @property
    def col_count(self) -> int:
        return self.slot.column_count

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.item.id,
            "kind": self.item.kind,
            "title": self.item.title,
            "start": format_minutes(self.item.start_minutes),
            "end": format_minutes(self.item.end_minutes),
            "column": self.slot.column,
            "columnCount": self.slot.column_count,
            "topOffsetMinutes": self.top_offset_minutes,
            "heightMinutes": self.height_minutes,
            "leftPercent": self.left_percent,
            "widthPercent": self.width_percent,
        }


@dataclass
class HourRow:
    hour: int
    label: str
    cells: List[Dict[str, Any]]


def format_minutes(minutes: int) -> str:
    """540 -> '09:00'. 1440 renders as '24:00'."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def events_overlap(a: CalendarItem, b: CalendarItem) -> bool:
    # Half-open: an event ending at 10:00 does not touch one starting at 10:00.
    if a.day != b.day:
        return False
    return a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes


def group_overlapping(items: Iterable[CalendarItem]) -> List[List[CalendarItem]]:
    """
    Partition one day's events into overlap clusters.

    A cluster is a connected component of the overlap graph: if A overlaps B and
    B overlaps C, all three land together even when A and C are disjoint. Each
    event is checked against every existing cluster; when it bridges several
    clusters they are merged into the earliest one.

    Members keep input order and clusters are ordered by their first member.
    """
    clusters: List[List[tuple[int, CalendarItem]]] = []
    seen_ids: set[str] = set()

    for position, item in enumerate(items):
        if item.id in seen_ids:
            raise InvalidEventError(f"Duplicate event id {item.id!r}.")
        seen_ids.add(item.id)

        hits = [
            idx for idx, cluster in enumerate(clusters)
            if any(events_overlap(item, member) for _, member in cluster)
        ]

        if not hits:
            clusters.append([(position, item)])
            continue

        target = clusters[hits[0]]
        target.append((position, item))
        for idx in hits[1:]:
            target.extend(clusters[idx])
        for idx in reversed(hits[1:]):
            del clusters[idx]
        target.sort(key=lambda pair: pair[0])

    return [[member for _, member in cluster] for cluster in clusters]


def assign_columns(cluster: Sequence[CalendarItem]) -> Dict[str, LayoutSlot]:
    """
    Greedy column assignment within one overlap cluster.

    Events are visited by start time (ties keep input order). Each takes the
    lowest column whose previous occupant has ended by its start, or opens a
    new column. Every event in the cluster shares the final column count so
    the whole cluster renders with equal-width slots.
    """
    ordered = sorted(enumerate(cluster), key=lambda pair: (pair[1].start_minutes, pair[0]))

    column_ends: List[int] = []
    columns: Dict[str, int] = {}
    for _, item in ordered:
        for col_idx, busy_until in enumerate(column_ends):
            if busy_until <= item.start_minutes:
                column_ends[col_idx] = item.end_minutes
                columns[item.id] = col_idx
                break
        else:
            columns[item.id] = len(column_ends)
            column_ends.append(item.end_minutes)

    col_count = len(column_ends)
    return {item.id: LayoutSlot(columns[item.id], col_count) for item in cluster}


def layout_day(items: Iterable[CalendarItem]) -> Dict[str, LayoutSlot]:
    """Group a day's events and assign columns to every cluster."""
    slots: Dict[str, LayoutSlot] = {}
    for cluster in group_overlapping(items):
        slots.update(assign_columns(cluster))
    return slots


def place_block(item: CalendarItem, slot: LayoutSlot, metrics: GridMetrics) -> EventBlock:
    """Turn a layout slot into grid geometry (px for vertical, % for horizontal)."""
    if metrics.hour_rows:
        row_hour: Optional[int] = item.start_minutes // 60
        top_offset = item.start_minutes - row_hour * 60
    else:
        row_hour = None
        top_offset = item.start_minutes - metrics.start_hour * 60

    height_minutes = item.duration_minutes
    # min height is a presentation clamp only; the layout above used real minutes
    height_px = max(metrics.min_height_px, height_minutes * metrics.px_per_minute)

    slot_width = 100 / slot.column_count
    if slot.column_count > 1:
        width = slot_width - metrics.gutter_percent
        left = slot.column * slot_width
    else:
        width = 100 - 2 * metrics.gutter_percent
        left = metrics.gutter_percent

    return EventBlock(
        item=item,
        slot=slot,
        row_hour=row_hour,
        top_offset_minutes=top_offset,
        height_minutes=height_minutes,
        top_px=top_offset * metrics.px_per_minute,
        height_px=height_px,
        left_percent=round(left, 4),
        width_percent=round(width, 4),
    )


def build_day_timeline_blocks(
    items: Iterable[CalendarItem],
    metrics: GridMetrics = GridMetrics(),
) -> List[EventBlock]:
    """
    Lay out one day's events and return positioned blocks.

    Blocks come back sorted by (start, column) so templates can render them in order.
    """
    items = list(items)
    slots = layout_day(items)
    blocks = [place_block(item, slots[item.id], metrics) for item in items]
    blocks.sort(key=lambda b: (b.item.start_minutes, b.slot.column))
    return blocks


def build_week_timeline(
    items: Iterable[CalendarItem],
    days: Sequence[date],
    metrics: GridMetrics = GridMetrics(),
) -> Dict[date, List[EventBlock]]:
    """
    Lay out each visible day independently.

    Returns dict[date] -> blocks for every date in days (empty list when free).
    Events on dates outside days are dropped.
    """
    by_day: Dict[date, List[CalendarItem]] = {d: [] for d in days}
    for item in items:
        if item.day not in by_day:
            logger.debug("Dropping event %s on %s: outside the visible days", item.id, item.day)
            continue
        by_day[item.day].append(item)

    return {d: build_day_timeline_blocks(day_items, metrics) for d, day_items in by_day.items()}


def build_hour_rows(
    blocks_by_day: Dict[date, List[EventBlock]],
    days: Sequence[date],
) -> List[HourRow]:
    """
    Reshape positioned blocks into 24 hour rows with one cell per day.

    Only meaningful for per-hour grids: each block sits in the row of its row_hour.
    """
    rows = [
        HourRow(hour=h, label=f"{h:02d}:00", cells=[{"date": d, "blocks": []} for d in days])
        for h in range(24)
    ]
    for day_idx, d in enumerate(days):
        for block in blocks_by_day.get(d, []):
            if block.row_hour is None:
                continue
            rows[block.row_hour].cells[day_idx]["blocks"].append(block)
    return rows


def week_days(day: date) -> List[date]:
    """The Monday -> Sunday week containing day."""
    week_start = day - timedelta(days=day.weekday())
    return [week_start + timedelta(days=i) for i in range(7)]
