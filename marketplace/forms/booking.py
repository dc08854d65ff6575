from datetime import timedelta

from django import forms
from django.utils import timezone


class DateRangeForm(forms.Form):
    start_date = forms.DateField()
    end_date = forms.DateField()

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get("start_date")
        end_date = cleaned_data.get("end_date")
        if start_date and end_date and end_date <= start_date:
            self.add_error("end_date", "End date must be after the start date.")
        return cleaned_data


class BookingDatesForm(DateRangeForm):
    def __init__(self, *args, today=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.today = today or timezone.now().date()

    def clean_start_date(self):
        start_date = self.cleaned_data["start_date"]
        if start_date < self.today + timedelta(days=1):
            raise forms.ValidationError("Start date must be tomorrow or later.")
        return start_date


class EstimateForm(DateRangeForm):
    """Date range for a cost estimate; unlike a booking, past dates are fine."""
