from __future__ import annotations

from typing import Dict, Any

from django.conf import settings

from .models import Tutor


def calendar_ui(request) -> Dict[str, Any]:
    """
    Global calendar UI context available to templates.

    Exposes the grid sizing from settings and the logged-in tutor (if any) so
    base.html and the grid templates agree on row heights.

    This intentionally does NOT include view-specific data (events, weeks, etc.).
    """
    tutor = None
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        tutor = Tutor.objects.filter(user=user).first()

    return {
        "current_tutor": tutor,
        "hour_height_px": getattr(settings, "CALENDAR_HOUR_HEIGHT_PX", 60),
    }
