from datetime import datetime

from django.contrib.auth import get_user_model
from django.utils import timezone

from calendar_app.models import Booking, CalendarNote, Student, Tutor

User = get_user_model()


def aware(year, month, day, hour=0, minute=0):
    return timezone.make_aware(datetime(year, month, day, hour, minute))


def make_tutor(username, role="GENERIC"):
    user = User.objects.create_user(username=username, password="pw")
    return Tutor.objects.create(user=user, role=role)


def make_student(name="Ada", surname="Rossi", student_class="3B"):
    return Student.objects.create(name=name, surname=surname, student_class=student_class)


def make_booking(tutor, student, start, end, **extra):
    return Booking.objects.create(tutor=tutor, student=student, creator=tutor, start_dt=start, end_dt=end, **extra)


def make_note(creator, start, end, description="Staff meeting", tutors=()):
    note = CalendarNote.objects.create(creator=creator, start_dt=start, end_dt=end, description=description)
    if tutors:
        note.tutors.set(tutors)
    return note
