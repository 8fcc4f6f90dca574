from django.contrib import admin
from .models import Booking, CalendarNote, Student, Tutor

@admin.register(Tutor)
class TutorAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "status")
    list_filter = ("role", "status")
    search_fields = ("user__username",)

@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("surname", "name", "student_class", "status")
    list_filter = ("status", "student_class")
    search_fields = ("name", "surname")

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("student", "tutor", "start_dt", "end_dt", "confirmed")
    list_filter = ("confirmed", "tutor")
    list_editable = ("confirmed",)
    date_hierarchy = "start_dt"

@admin.register(CalendarNote)
class CalendarNoteAdmin(admin.ModelAdmin):
    list_display = ("description", "creator", "start_dt", "end_dt")
    list_filter = ("creator",)
    filter_horizontal = ("tutors",)
    search_fields = ("description",)
