import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("surname", models.CharField(max_length=120)),
                ("student_class", models.CharField(blank=True, max_length=50)),
                ("description", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("ACTIVE", "Active"), ("INACTIVE", "Inactive")], default="ACTIVE", max_length=20)),
            ],
            options={
                "ordering": ["surname", "name"],
            },
        ),
        migrations.CreateModel(
            name="Tutor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("GENERIC", "Generic"), ("STAFF", "Staff")], default="GENERIC", max_length=20)),
                ("status", models.CharField(choices=[("ACTIVE", "Active"), ("INACTIVE", "Inactive")], default="ACTIVE", max_length=20)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="tutor", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_dt", models.DateTimeField()),
                ("end_dt", models.DateTimeField()),
                ("confirmed", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("creator", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_bookings", to="calendar_app.tutor")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="calendar_app.student")),
                ("tutor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="calendar_app.tutor")),
            ],
            options={
                "ordering": ["start_dt"],
                "indexes": [models.Index(fields=["tutor", "start_dt"], name="cal_booking_tutor_start_idx")],
            },
        ),
        migrations.CreateModel(
            name="CalendarNote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_dt", models.DateTimeField()),
                ("end_dt", models.DateTimeField()),
                ("description", models.TextField(blank=True)),
                ("creator", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="created_notes", to="calendar_app.tutor")),
                ("tutors", models.ManyToManyField(blank=True, related_name="notes", to="calendar_app.tutor")),
            ],
            options={
                "ordering": ["start_dt"],
                "indexes": [models.Index(fields=["creator", "start_dt"], name="cal_note_creator_start_idx")],
            },
        ),
    ]
