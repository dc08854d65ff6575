from django import forms

from ..lifecycle import AccountStatus, ReportReason, ReportStatus


class ReportForm(forms.Form):
    reason = forms.ChoiceField(choices=ReportReason.choices)
    description = forms.CharField(max_length=2000)

    def clean_description(self):
        description = self.cleaned_data["description"].strip()
        if not description:
            raise forms.ValidationError("Please describe the problem.")
        return description


class ReportDecisionForm(forms.Form):
    status = forms.ChoiceField(choices=[(ReportStatus.REVIEWED, "Reviewed"), (ReportStatus.RESOLVED, "Resolved")])
    admin_notes = forms.CharField(required=False, max_length=2000)
    disable_listing = forms.BooleanField(required=False)

    def clean_admin_notes(self):
        return (self.cleaned_data.get("admin_notes") or "").strip()

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("disable_listing") and cleaned_data.get("status") != ReportStatus.RESOLVED:
            self.add_error("disable_listing", "A listing can only be disabled when resolving a report.")
        return cleaned_data


class AccountStatusForm(forms.Form):
    status = forms.ChoiceField(
        choices=[
            (AccountStatus.ACTIVE, "Active"),
            (AccountStatus.SUSPENDED, "Suspended"),
            (AccountStatus.DEACTIVATED, "Deactivated"),
        ]
    )
    reason = forms.CharField(required=False, max_length=500)
