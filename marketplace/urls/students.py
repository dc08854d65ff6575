"""Saved-hostel and dashboard URL patterns."""

from django.urls import path

from ..api.views import students

urlpatterns = [
    path("students/saved-hostels", students.SavedHostelListView.as_view(), name="saved_hostels"),
    path("students/saved-hostels/<int:hostel_id>", students.SavedHostelView.as_view(), name="saved_hostel"),
    path("landlords/me/dashboard", students.LandlordDashboardView.as_view(), name="landlord_dashboard"),
]
