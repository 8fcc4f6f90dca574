from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from calendar_app.models import Booking, CalendarNote

from .helpers import aware, make_booking, make_note, make_student, make_tutor

User = get_user_model()

IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148"
DESKTOP_UA = "Mozilla/5.0 (X11; Linux x86_64) Gecko/20100101 Firefox/128.0"


class CalendarViewTestCase(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.tutor = make_tutor("giulia")
        cls.other = make_tutor("marco")
        cls.staff = make_tutor("boss", role="STAFF")
        cls.student = make_student()

    def setUp(self):
        self.client.force_login(self.tutor.user)


class EntryViewTests(CalendarViewTestCase):
    def test_login_required(self):
        self.client.logout()
        response = self.client.get(reverse("calendar:calendar_week"))
        self.assertEqual(response.status_code, 302)
        self.assertIn("/admin/login/", response["Location"])

    def test_phone_goes_to_day_view(self):
        response = self.client.get(reverse("calendar:calendar_home"), HTTP_USER_AGENT=IPHONE_UA)
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response["Location"].startswith(reverse("calendar:calendar_day")))

    def test_desktop_goes_to_week_view(self):
        response = self.client.get(reverse("calendar:calendar_home"), HTTP_USER_AGENT=DESKTOP_UA)
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response["Location"].startswith(reverse("calendar:calendar_week")))

    def test_user_without_tutor_profile_is_forbidden(self):
        visitor = User.objects.create_user(username="visitor", password="pw")
        self.client.force_login(visitor)
        response = self.client.get(reverse("calendar:calendar_week"))
        self.assertEqual(response.status_code, 403)


class WeekViewTests(CalendarViewTestCase):
    def test_overlapping_lessons_render_side_by_side(self):
        a = make_booking(self.tutor, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        b = make_booking(self.tutor, self.student, aware(2026, 3, 4, 9, 30), aware(2026, 3, 4, 10, 30))
        c = make_booking(self.tutor, self.student, aware(2026, 3, 6, 9), aware(2026, 3, 6, 10))

        response = self.client.get(reverse("calendar:calendar_week"), {"date": "2026-03-04"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["days"][0], date(2026, 3, 2))
        self.assertEqual(response.context["week_label"], "March 2 - 8, 2026")

        wednesday = response.context["blocks_by_day"][date(2026, 3, 4)]
        self.assertEqual([(blk.id, blk.col, blk.col_count) for blk in wednesday], [
            (f"lesson-{a.pk}", 0, 2),
            (f"lesson-{b.pk}", 1, 2),
        ])
        friday = response.context["blocks_by_day"][date(2026, 3, 6)]
        self.assertEqual([(blk.id, blk.col_count) for blk in friday], [(f"lesson-{c.pk}", 1)])

        self.assertContains(response, f'data-event-id="lesson-{a.pk}"')
        self.assertContains(response, "left: 50.0000%; width: 49.0000%;")

    def test_other_tutors_lessons_hidden(self):
        make_booking(self.other, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        response = self.client.get(reverse("calendar:calendar_week"), {"date": "2026-03-04"})
        self.assertEqual(response.context["blocks_by_day"][date(2026, 3, 4)], [])

    def test_staff_sees_all_tutors(self):
        make_booking(self.tutor, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        make_booking(self.other, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        self.client.force_login(self.staff.user)

        response = self.client.get(reverse("calendar:calendar_week"), {"date": "2026-03-04"})

        blocks = response.context["blocks_by_day"][date(2026, 3, 4)]
        self.assertEqual([blk.col_count for blk in blocks], [2, 2])

    def test_bad_date_falls_back_to_today(self):
        response = self.client.get(reverse("calendar:calendar_week"), {"date": "not-a-date"})
        self.assertEqual(response.status_code, 200)
        self.assertIn(response.context["today"], response.context["days"])

    def test_dates_at_the_calendar_edges_fall_back_to_today(self):
        for value in ("0001-01-01", "9999-12-31", "1899-12-31"):
            response = self.client.get(reverse("calendar:calendar_week"), {"date": value})
            self.assertEqual(response.status_code, 200, value)
            self.assertIn(response.context["today"], response.context["days"])


class DayViewTests(CalendarViewTestCase):
    def test_lessons_and_notes_share_the_layout(self):
        booking = make_booking(self.tutor, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        note = make_note(self.tutor, aware(2026, 3, 4, 9, 45), aware(2026, 3, 4, 11))
        make_booking(self.tutor, self.student, aware(2026, 3, 4, 10, 30), aware(2026, 3, 4, 11, 30))

        response = self.client.get(reverse("calendar:calendar_day"), {"date": "2026-03-04"})

        self.assertEqual(response.status_code, 200)
        blocks = response.context["event_blocks"]
        self.assertEqual([blk.id for blk in blocks][:2], [f"lesson-{booking.pk}", f"note-{note.pk}"])
        self.assertEqual({blk.col_count for blk in blocks}, {2})
        self.assertEqual(blocks[2].col, 0)

        nine = response.context["hour_rows"][9]
        self.assertEqual(len(nine.cells), 1)
        self.assertEqual(len(nine.cells[0]["blocks"]), 2)
        self.assertContains(response, reverse("calendar:calendar_note_edit", args=[note.pk]))

    def test_dates_at_the_calendar_edges_fall_back_to_today(self):
        for value in ("0001-01-01", "9999-12-31"):
            response = self.client.get(reverse("calendar:calendar_day"), {"date": value})
            self.assertEqual(response.status_code, 200, value)
            self.assertEqual(response.context["day"], response.context["today"])


class LayoutJsonTests(CalendarViewTestCase):
    def test_layout_payload(self):
        a = make_booking(self.tutor, self.student, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        b = make_note(self.tutor, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10), description="Prep")

        response = self.client.get(reverse("calendar:calendar_layout_json"), {"start": "2026-03-04", "end": "2026-03-05"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["ok"])
        self.assertEqual([d["date"] for d in data["days"]], ["2026-03-04", "2026-03-05"])
        self.assertEqual(set(data["days"][0]), {"date", "events"})
        self.assertEqual(data["days"][1]["events"], [])

        first, second = data["days"][0]["events"]
        self.assertEqual(first["id"], f"lesson-{a.pk}")
        self.assertEqual(second["id"], f"note-{b.pk}")
        self.assertEqual(second["title"], "Prep")
        self.assertEqual((first["column"], first["columnCount"]), (0, 2))
        self.assertEqual((second["column"], second["columnCount"]), (1, 2))
        self.assertEqual(first["topOffsetMinutes"], 540)
        self.assertEqual(first["heightMinutes"], 60)
        self.assertEqual((first["start"], first["end"]), ("09:00", "10:00"))

    def test_end_defaults_to_start(self):
        response = self.client.get(reverse("calendar:calendar_layout_json"), {"start": "2026-03-04"})
        self.assertEqual(len(response.json()["days"]), 1)

    def test_bad_ranges_rejected(self):
        url = reverse("calendar:calendar_layout_json")
        for params in (
            {},
            {"start": "yesterday"},
            {"start": "2026-03-04", "end": "2026-03-01"},
            {"start": "2026-01-01", "end": "2026-03-01"},
            {"start": "0001-01-01"},
            {"start": "9999-12-31"},
            {"start": "2026-03-04", "end": "9999-12-31"},
        ):
            response = self.client.get(url, params)
            self.assertEqual(response.status_code, 400, params)
            self.assertFalse(response.json()["ok"])

    def test_post_not_allowed(self):
        response = self.client.post(reverse("calendar:calendar_layout_json"), {"start": "2026-03-04"})
        self.assertEqual(response.status_code, 405)


class NoteCrudTests(CalendarViewTestCase):
    def test_create_note(self):
        response = self.client.post(reverse("calendar:calendar_note_create"), {
            "description": "Parents meeting",
            "date": "2026-03-04",
            "start_time": "17:00",
            "end_time": "18:00",
            "tutors": [self.tutor.pk],
            "return_to": "/calendar/week/?date=2026-03-04",
        })

        self.assertRedirects(response, "/calendar/week/?date=2026-03-04", fetch_redirect_response=False)
        note = CalendarNote.objects.get()
        self.assertEqual(note.creator, self.tutor)
        self.assertEqual(note.start_dt, aware(2026, 3, 4, 17))

    def test_create_rejects_inverted_times(self):
        response = self.client.post(reverse("calendar:calendar_note_create"), {
            "description": "Backwards",
            "date": "2026-03-04",
            "start_time": "18:00",
            "end_time": "17:00",
        })
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "End time must be later than start time.")
        self.assertFalse(CalendarNote.objects.exists())

    def test_external_return_to_ignored(self):
        response = self.client.post(reverse("calendar:calendar_note_create") + "?date=2026-03-04", {
            "date": "2026-03-04",
            "start_time": "17:00",
            "end_time": "18:00",
            "return_to": "https://evil.example.com/",
        })
        self.assertRedirects(response, "/calendar/week/?date=2026-03-04", fetch_redirect_response=False)

    def test_edit_note(self):
        note = make_note(self.tutor, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        response = self.client.post(reverse("calendar:calendar_note_edit", args=[note.pk]), {
            "description": "Moved",
            "date": "2026-03-05",
            "start_time": "11:00",
            "end_time": "12:00",
        })
        self.assertEqual(response.status_code, 302)
        note.refresh_from_db()
        self.assertEqual(note.description, "Moved")
        self.assertEqual(note.start_dt, aware(2026, 3, 5, 11))

    def test_cannot_edit_someone_elses_note(self):
        note = make_note(self.other, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10), tutors=[self.tutor])
        response = self.client.get(reverse("calendar:calendar_note_edit", args=[note.pk]))
        self.assertEqual(response.status_code, 403)

    def test_staff_can_edit_any_note(self):
        note = make_note(self.other, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        self.client.force_login(self.staff.user)
        response = self.client.get(reverse("calendar:calendar_note_edit", args=[note.pk]))
        self.assertEqual(response.status_code, 200)

    def test_delete_note(self):
        note = make_note(self.tutor, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10))
        url = reverse("calendar:calendar_note_delete", args=[note.pk])

        self.assertEqual(self.client.get(url).status_code, 200)
        response = self.client.post(url)

        self.assertRedirects(response, "/calendar/week/?date=2026-03-04", fetch_redirect_response=False)
        self.assertFalse(CalendarNote.objects.filter(pk=note.pk).exists())

    def test_missing_note_404(self):
        response = self.client.get(reverse("calendar:calendar_note_edit", args=[999]))
        self.assertEqual(response.status_code, 404)


class BookingCreateTests(CalendarViewTestCase):
    def test_create_booking(self):
        response = self.client.post(reverse("calendar:calendar_booking_create") + "?date=2026-03-04", {
            "student": self.student.pk,
            "tutor": self.tutor.pk,
            "date": "2026-03-04",
            "start_time": "15:00",
            "end_time": "16:00",
            "confirmed": "on",
        })

        self.assertRedirects(response, "/calendar/week/?date=2026-03-04", fetch_redirect_response=False)
        booking = Booking.objects.get()
        self.assertEqual(booking.creator, self.tutor)
        self.assertTrue(booking.confirmed)

    def test_form_prefills_requesting_tutor(self):
        response = self.client.get(reverse("calendar:calendar_booking_create"), {"date": "2026-03-04"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["form"].initial["tutor"], self.tutor)

    def test_generic_tutor_cannot_book_for_another_tutor(self):
        response = self.client.post(reverse("calendar:calendar_booking_create"), {
            "student": self.student.pk,
            "tutor": self.other.pk,
            "date": "2026-03-04",
            "start_time": "15:00",
            "end_time": "16:00",
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn("tutor", response.context["form"].errors)
        self.assertFalse(Booking.objects.exists())

    def test_staff_can_book_for_another_tutor(self):
        self.client.force_login(self.staff.user)
        response = self.client.post(reverse("calendar:calendar_booking_create"), {
            "student": self.student.pk,
            "tutor": self.other.pk,
            "date": "2026-03-04",
            "start_time": "15:00",
            "end_time": "16:00",
        })

        self.assertEqual(response.status_code, 302)
        booking = Booking.objects.get()
        self.assertEqual((booking.tutor, booking.creator), (self.other, self.staff))


class NoteAssignmentTests(CalendarViewTestCase):
    def note_payload(self, **extra):
        payload = {
            "description": "Exam prep",
            "date": "2026-03-04",
            "start_time": "17:00",
            "end_time": "18:00",
        }
        payload.update(extra)
        return payload

    def test_generic_tutor_note_is_assigned_to_themselves(self):
        response = self.client.post(
            reverse("calendar:calendar_note_create"),
            self.note_payload(tutors=[self.other.pk]),
        )

        self.assertEqual(response.status_code, 302)
        note = CalendarNote.objects.get()
        self.assertEqual(list(note.tutors.all()), [self.tutor])

    def test_generic_tutor_form_hides_assignees(self):
        response = self.client.get(reverse("calendar:calendar_note_create"))
        self.assertNotIn("tutors", response.context["form"].fields)

    def test_generic_tutor_edit_keeps_assignees(self):
        note = make_note(self.tutor, aware(2026, 3, 4, 9), aware(2026, 3, 4, 10), tutors=[self.tutor, self.other])
        response = self.client.post(
            reverse("calendar:calendar_note_edit", args=[note.pk]),
            self.note_payload(tutors=[self.staff.pk]),
        )

        self.assertEqual(response.status_code, 302)
        self.assertEqual(set(note.tutors.all()), {self.tutor, self.other})

    def test_staff_assigns_any_tutor(self):
        self.client.force_login(self.staff.user)
        response = self.client.post(
            reverse("calendar:calendar_note_create"),
            self.note_payload(tutors=[self.tutor.pk, self.other.pk]),
        )

        self.assertEqual(response.status_code, 302)
        note = CalendarNote.objects.get()
        self.assertEqual(set(note.tutors.all()), {self.tutor, self.other})
        self.assertEqual(note.creator, self.staff)
