from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


STATUS_CHOICES = [
    ("ACTIVE", "Active"),
    ("INACTIVE", "Inactive"),
]


class Tutor(models.Model):
    """
    Tutoring staff member. Login goes through the linked Django user.

    STAFF tutors see every tutor's calendar; GENERIC tutors only their own.
    """
    ROLES = [
        ("GENERIC", "Generic"),
        ("STAFF", "Staff"),
    ]
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tutor")
    role = models.CharField(max_length=20, choices=ROLES, default="GENERIC")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="ACTIVE")

    @property
    def is_staff_role(self) -> bool:
        return self.role == "STAFF"

    def __str__(self):
        return self.user.get_username()


class Student(models.Model):
    name = models.CharField(max_length=120)
    surname = models.CharField(max_length=120)
    student_class = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="ACTIVE")

    class Meta:
        ordering = ["surname", "name"]

    def __str__(self):
        if self.student_class:
            return f"{self.name} {self.surname} ({self.student_class})"
        return f"{self.name} {self.surname}"


class TimedRecord(models.Model):
    """Shared start/end handling for anything drawn on the calendar."""
    start_dt = models.DateTimeField()
    end_dt = models.DateTimeField()

    class Meta:
        abstract = True

    def clean(self):
        super().clean()
        if self.start_dt and self.end_dt and self.end_dt <= self.start_dt:
            raise ValidationError("End time must be later than start time.")


class Booking(TimedRecord):
    """
    A scheduled lesson between a tutor and a student.

    creator may differ from tutor (staff booking on someone else's behalf).
    confirmed=False means the booking is still pending.
    """
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="bookings")
    tutor = models.ForeignKey(Tutor, on_delete=models.CASCADE, related_name="bookings")
    creator = models.ForeignKey(
        Tutor, on_delete=models.SET_NULL, null=True, blank=True, related_name="created_bookings"
    )
    confirmed = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["start_dt"]
        indexes = [
            models.Index(fields=["tutor", "start_dt"], name="cal_booking_tutor_start_idx"),
        ]

    def __str__(self):
        return f"{self.student} with {self.tutor} ({self.start_dt})"


class CalendarNote(TimedRecord):
    """
    A reminder or appointment on the calendar, shared with any number of tutors.
    """
    description = models.TextField(blank=True)
    creator = models.ForeignKey(Tutor, on_delete=models.CASCADE, related_name="created_notes")
    tutors = models.ManyToManyField(Tutor, blank=True, related_name="notes")

    class Meta:
        ordering = ["start_dt"]
        indexes = [
            models.Index(fields=["creator", "start_dt"], name="cal_note_creator_start_idx"),
        ]

    def __str__(self):
        return f"{self.description or 'Note'} ({self.start_dt})"

    def can_edit(self, tutor) -> bool:
        if tutor is None:
            return False
        return tutor.is_staff_role or self.creator_id == tutor.id
