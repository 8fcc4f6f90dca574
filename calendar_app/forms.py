from datetime import datetime

from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from .dates import MAX_CALENDAR_DATE, MIN_CALENDAR_DATE, in_calendar_range
from .models import Booking, CalendarNote, Student, Tutor


class TimedRecordForm(forms.ModelForm):
    """
    Date + start/end time inputs that fill start_dt/end_dt on the instance.

    Events never cross midnight, so one date field covers both ends.

    own_tutor: when set, the requester may only book or assign for that tutor
    (GENERIC tutors); None leaves every active tutor selectable.
    """
    date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))
    start_time = forms.TimeField(widget=forms.TimeInput(attrs={"type": "time"}))
    end_time = forms.TimeField(widget=forms.TimeInput(attrs={"type": "time"}))

    def __init__(self, *args, own_tutor=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.own_tutor = own_tutor
        if self.instance.pk:
            start = timezone.localtime(self.instance.start_dt)
            end = timezone.localtime(self.instance.end_dt)
            self.initial.setdefault("date", start.date())
            self.initial.setdefault("start_time", start.time().replace(second=0, microsecond=0))
            self.initial.setdefault("end_time", end.time().replace(second=0, microsecond=0))

    def selectable_tutors(self):
        tutors = Tutor.objects.filter(status="ACTIVE").select_related("user")
        if self.own_tutor is not None:
            tutors = tutors.filter(pk=self.own_tutor.pk)
        return tutors

    def clean_date(self):
        day = self.cleaned_data["date"]
        if not in_calendar_range(day):
            raise ValidationError(f"Pick a date between {MIN_CALENDAR_DATE} and {MAX_CALENDAR_DATE}.")
        return day

    def clean(self):
        cleaned = super().clean()
        day = cleaned.get("date")
        start = cleaned.get("start_time")
        end = cleaned.get("end_time")

        if start and end and end <= start:
            raise ValidationError("End time must be later than start time.")

        if day and start and end:
            self.instance.start_dt = timezone.make_aware(datetime.combine(day, start))
            self.instance.end_dt = timezone.make_aware(datetime.combine(day, end))

        return cleaned


class CalendarNoteForm(TimedRecordForm):
    class Meta:
        model = CalendarNote
        fields = ["description", "tutors"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "tutors": forms.CheckboxSelectMultiple,
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.own_tutor is not None:
            # GENERIC tutors write notes for themselves only; assignees stay as they are
            del self.fields["tutors"]
        else:
            self.fields["tutors"].queryset = self.selectable_tutors()
        self.order_fields(["description", "date", "start_time", "end_time", "tutors"])


class BookingForm(TimedRecordForm):
    class Meta:
        model = Booking
        fields = ["student", "tutor", "confirmed"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["student"].queryset = Student.objects.filter(status="ACTIVE")
        self.fields["tutor"].queryset = self.selectable_tutors()
        self.order_fields(["student", "tutor", "date", "start_time", "end_time", "confirmed"])
