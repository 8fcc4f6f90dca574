import logging
from datetime import date
from typing import List, Optional

from django.core.exceptions import PermissionDenied
from django.db.models import Q
from django.utils import timezone

from calendar_app.dates import aware_range
from calendar_app.layout import MINUTES_PER_DAY, CalendarItem, InvalidEventError
from calendar_app.models import Booking, CalendarNote, Tutor

logger = logging.getLogger(__name__)

def visible_tutor(user) -> Optional[Tutor]:
    """
    Whose calendar this user gets to see.

    Returns None for "everyone" (superusers and STAFF tutors), otherwise the
    user's own Tutor. Users with neither are refused.
    """
    if user.is_superuser:
        return None

    tutor = Tutor.objects.filter(user=user).first()
    if tutor is None:
        raise PermissionDenied("This account has no tutor profile.")

    return None if tutor.is_staff_role else tutor

def get_bookings_in_range(tutor: Optional[Tutor], start_d: date, end_d: date):
    """
    Bookings whose local start date falls inside the inclusive range [start_d, end_d].
    tutor=None returns every tutor's bookings.
    """
    start_dt, end_dt = aware_range(start_d, end_d)
    qs = (Booking.objects
          .filter(start_dt__gte=start_dt, start_dt__lte=end_dt)
          .select_related("student", "tutor__user"))
    if tutor is not None:
        qs = qs.filter(tutor=tutor)
    return qs.order_by("start_dt", "id")

def get_notes_in_range(tutor: Optional[Tutor], start_d: date, end_d: date):
    """
    Notes starting inside [start_d, end_d] that the tutor created or was assigned to.
    """
    start_dt, end_dt = aware_range(start_d, end_d)
    qs = CalendarNote.objects.filter(start_dt__gte=start_dt, start_dt__lte=end_dt)
    if tutor is not None:
        qs = qs.filter(Q(creator=tutor) | Q(tutors=tutor)).distinct()
    return qs.order_by("start_dt", "id")

def to_calendar_item(record, kind: str) -> CalendarItem:
    """
    Convert a Booking/CalendarNote into a layout item on its local start date.

    Records running past midnight are cut at the end of their start day.
    Raises InvalidEventError when the record ends before (or when) it starts.
    """
    start = timezone.localtime(record.start_dt)
    end = timezone.localtime(record.end_dt)
    if end <= start:
        raise InvalidEventError(f"{kind} {record.pk} ends at {end:%Y-%m-%d %H:%M}, not after its start.")

    start_min = start.hour * 60 + start.minute
    if end.date() > start.date():
        end_min = MINUTES_PER_DAY
    else:
        end_min = end.hour * 60 + end.minute

    if kind == "lesson":
        title = f"{record.student.name} {record.student.surname}".strip()
    else:
        title = record.description or "Note"

    return CalendarItem(
        id=f"{kind}-{record.pk}",
        day=start.date(),
        start_minutes=start_min,
        end_minutes=end_min,
        kind=kind,
        title=title,
        source=record,
    )

def get_calendar_items(tutor: Optional[Tutor], start_d: date, end_d: date) -> List[CalendarItem]:
    """
    All lessons and notes in [start_d, end_d] as layout items, ordered by (day, start).

    Malformed records are logged and left out; they never reach the layout.
    """
    records = [(b, "lesson") for b in get_bookings_in_range(tutor, start_d, end_d)]
    records += [(n, "note") for n in get_notes_in_range(tutor, start_d, end_d)]

    items: List[CalendarItem] = []
    for record, kind in records:
        try:
            items.append(to_calendar_item(record, kind))
        except InvalidEventError as e:
            logger.warning("Skipping %s %s: %s", kind, record.pk, e)

    items.sort(key=lambda item: (item.day, item.start_minutes))
    return items
