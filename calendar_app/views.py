import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.shortcuts import render, get_object_or_404, redirect
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET

from .dates import MAX_CALENDAR_DATE, MIN_CALENDAR_DATE, parse_ymd, parse_ymd_strict, week_label
from .devices import looks_like_phone
from .forms import BookingForm, CalendarNoteForm
from .layout import GridMetrics, build_hour_rows, build_week_timeline, week_days
from .models import CalendarNote, Tutor
from .queries import get_calendar_items, visible_tutor
from .url_helpers import safe_return_to, with_date

from datetime import timedelta

logger = logging.getLogger(__name__)

#Pure Helper functions
def grid_metrics(hour_rows: bool = True) -> GridMetrics:
    """Grid sizing from settings; week, day and JSON views all go through here."""
    return GridMetrics(
        hour_height_px=getattr(settings, "CALENDAR_HOUR_HEIGHT_PX", 60),
        min_height_px=getattr(settings, "CALENDAR_MIN_EVENT_HEIGHT_PX", 20),
        gutter_percent=getattr(settings, "CALENDAR_GUTTER_PERCENT", 1),
        hour_rows=hour_rows,
    )

def current_tutor(request):
    return Tutor.objects.filter(user=request.user).first()

def own_tutor_only(request, tutor):
    """The tutor GENERIC requesters are limited to, or None when they may pick anyone."""
    if request.user.is_superuser or (tutor is not None and tutor.is_staff_role):
        return None
    return tutor

#Calendar Views
@login_required
def calendar_entry(request):
    """
    Router entry-point:
      - phone -> single-day view
      - everything else -> week view
    """
    today = timezone.localdate()

    if looks_like_phone(request):
        return redirect(with_date("calendar:calendar_day", today))

    return redirect(with_date("calendar:calendar_week", today))

@ensure_csrf_cookie
@login_required
def calendar_week(request):
    """
    Week grid view (Monday → Sunday).

    Query params:
      - date=YYYY-MM-DD (defaults to today; used to choose the week)

    Behavior:
      - Fetches lessons + notes starting inside the week that this tutor may see
      - Lays out each day independently (overlap clusters → columns)
      - Reshapes the blocks into 24 hour rows x 7 day cells for the template
    """
    today = timezone.localdate()
    tutor = visible_tutor(request.user)

    day = parse_ymd(request.GET.get("date"), default=today)
    days = week_days(day)
    week_start, week_end = days[0], days[-1]

    items = get_calendar_items(tutor, week_start, week_end)
    blocks_by_day = build_week_timeline(items, days, grid_metrics(hour_rows=True))

    context = {
        "today": today,
        "day": day,
        "days": days,
        "week_start": week_start,
        "week_end": week_end,
        "week_label": week_label(week_start),
        "prev_week": week_start - timedelta(days=7),
        "next_week": week_start + timedelta(days=7),
        "blocks_by_day": blocks_by_day,
        "hour_rows": build_hour_rows(blocks_by_day, days),
    }

    return render(request, "calendar/calendar_week.html", context)

@ensure_csrf_cookie
@login_required
def calendar_day(request):
    """
    Day view (mobile grid).

    Query params:
      - date=YYYY-MM-DD (defaults to today)

    Same layout as a single column of the week grid.
    """
    today = timezone.localdate()
    tutor = visible_tutor(request.user)

    day = parse_ymd(request.GET.get("date"), default=today)

    items = get_calendar_items(tutor, day, day)
    blocks_by_day = build_week_timeline(items, [day], grid_metrics(hour_rows=True))

    context = {
        "today": today,
        "day": day,
        "prev_day": day - timedelta(days=1),
        "next_day": day + timedelta(days=1),
        "event_blocks": blocks_by_day[day],
        "hour_rows": build_hour_rows(blocks_by_day, [day]),
    }

    return render(request, "calendar/calendar_day.html", context)

@require_GET
@login_required
def calendar_layout_json(request):
    """
    Layout for client-side renderers (e.g. the lesson modal's day preview).

    Query params:
      - start=YYYY-MM-DD (required)
      - end=YYYY-MM-DD (defaults to start)

    Returns JSON:
      { ok: true, days: [{date, events: [{id, kind, title, start, end, column,
        columnCount, topOffsetMinutes, heightMinutes, leftPercent, widthPercent}]}] }
    """
    try:
        start_d = parse_ymd_strict(request.GET.get("start"))
        end_d = parse_ymd_strict(request.GET.get("end")) if request.GET.get("end") else start_d
    except ValueError:
        return JsonResponse({"ok": False, "error": f"start/end must be YYYY-MM-DD dates between {MIN_CALENDAR_DATE} and {MAX_CALENDAR_DATE}."}, status=400)

    if end_d < start_d:
        return JsonResponse({"ok": False, "error": "end must not be before start."}, status=400)

    max_days = getattr(settings, "CALENDAR_MAX_RANGE_DAYS", 31)
    if (end_d - start_d).days + 1 > max_days:
        return JsonResponse({"ok": False, "error": f"Range is limited to {max_days} days."}, status=400)

    tutor = visible_tutor(request.user)
    days = [start_d + timedelta(days=i) for i in range((end_d - start_d).days + 1)]

    items = get_calendar_items(tutor, start_d, end_d)
    blocks_by_day = build_week_timeline(items, days, grid_metrics(hour_rows=False))

    payload = [
        {
            "date": d.strftime("%Y-%m-%d"),
            "events": [block.as_dict() for block in blocks_by_day[d]],
        }
        for d in days
    ]

    return JsonResponse({"ok": True, "days": payload})

#Note CRUD
@ensure_csrf_cookie
@login_required
def calendar_note_create(request):
    tutor = current_tutor(request)
    if tutor is None:
        raise PermissionDenied("Only tutors can add calendar notes.")
    own_tutor = own_tutor_only(request, tutor)

    default_date = parse_ymd(request.GET.get("date"))
    default_return = with_date("calendar:calendar_week", default_date)
    return_to = safe_return_to(request, request.POST.get("return_to") or request.GET.get("return_to"), default_return)

    if request.method == "POST":
        form = CalendarNoteForm(request.POST, own_tutor=own_tutor)
        if form.is_valid():
            note = form.save(commit=False)
            note.creator = tutor
            note.save()
            form.save_m2m()
            if own_tutor is not None:
                note.tutors.set([own_tutor])
            logger.info("Tutor %s created note %s", tutor, note.pk)
            return redirect(return_to)
    else:
        form = CalendarNoteForm(initial={"date": default_date, "tutors": [tutor]}, own_tutor=own_tutor)

    context = {"form": form, "note": None, "return_to": return_to}
    return render(request, "calendar/calendar_note_form.html", context)

@ensure_csrf_cookie
@login_required
def calendar_note_edit(request, note_id):
    note = get_object_or_404(CalendarNote, id=note_id)
    tutor = current_tutor(request)
    if not (request.user.is_superuser or note.can_edit(tutor)):
        raise PermissionDenied("You cannot edit this note.")
    own_tutor = own_tutor_only(request, tutor)

    default_return = with_date("calendar:calendar_week", timezone.localtime(note.start_dt).date())
    return_to = safe_return_to(request, request.POST.get("return_to") or request.GET.get("return_to"), default_return)

    if request.method == "POST":
        form = CalendarNoteForm(request.POST, instance=note, own_tutor=own_tutor)
        if form.is_valid():
            form.save()
            return redirect(return_to)
    else:
        form = CalendarNoteForm(instance=note, own_tutor=own_tutor)

    context = {"form": form, "note": note, "return_to": return_to}
    return render(request, "calendar/calendar_note_form.html", context)

@ensure_csrf_cookie
@login_required
def calendar_note_delete(request, note_id):
    note = get_object_or_404(CalendarNote, id=note_id)
    if not (request.user.is_superuser or note.can_edit(current_tutor(request))):
        raise PermissionDenied("You cannot delete this note.")

    default_return = with_date("calendar:calendar_week", timezone.localtime(note.start_dt).date())
    return_to = safe_return_to(request, request.POST.get("return_to") or request.GET.get("return_to"), default_return)

    if request.method == "POST":
        logger.info("Deleting note %s", note.pk)
        note.delete()
        return redirect(return_to)

    context = {"note": note, "return_to": return_to}
    return render(request, "calendar/calendar_note_delete.html", context)

#Booking CRUD
@ensure_csrf_cookie
@login_required
def calendar_booking_create(request):
    tutor = current_tutor(request)
    if tutor is None and not request.user.is_superuser:
        raise PermissionDenied("Only tutors can book lessons.")
    own_tutor = own_tutor_only(request, tutor)

    default_date = parse_ymd(request.GET.get("date"))
    default_return = with_date("calendar:calendar_week", default_date)
    return_to = safe_return_to(request, request.POST.get("return_to") or request.GET.get("return_to"), default_return)

    if request.method == "POST":
        form = BookingForm(request.POST, own_tutor=own_tutor)
        if form.is_valid():
            booking = form.save(commit=False)
            booking.creator = tutor
            booking.save()
            logger.info("Booked lesson %s for %s", booking.pk, booking.tutor)
            return redirect(return_to)
    else:
        form = BookingForm(initial={"date": default_date, "tutor": tutor}, own_tutor=own_tutor)

    context = {"form": form, "return_to": return_to}
    return render(request, "calendar/calendar_booking_form.html", context)
