from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('admin/', admin.site.urls),

    # calendar app owns these routes
    path("calendar/", include("calendar_app.urls")),

    path("", RedirectView.as_view(pattern_name="calendar:calendar_home", permanent=False)),
]
