# hostelconnect/urls.py

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # Everything else is the marketplace JSON API.
    path("api/", include("marketplace.urls")),
]
