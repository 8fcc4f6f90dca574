from django.urls import path
from calendar_app import views

app_name = "calendar"

urlpatterns = [
    path("", views.calendar_entry, name="calendar_home"),  # /calendar/

    path("week/", views.calendar_week, name="calendar_week"),
    path("day/", views.calendar_day, name="calendar_day"),
    path("layout/", views.calendar_layout_json, name="calendar_layout_json"),

    path("note/new/", views.calendar_note_create, name="calendar_note_create"),
    path("note/<int:note_id>/edit/", views.calendar_note_edit, name="calendar_note_edit"),
    path("note/<int:note_id>/delete/", views.calendar_note_delete, name="calendar_note_delete"),

    path("booking/new/", views.calendar_booking_create, name="calendar_booking_create"),
]
