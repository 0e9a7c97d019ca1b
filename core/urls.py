from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # calendar app owns these routes
    path("calendar/", include("event_calendar.urls")),
]
