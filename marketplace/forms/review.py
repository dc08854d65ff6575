from django import forms

from ..models import Review


class ReviewForm(forms.ModelForm):
    rating = forms.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Review
        fields = ["rating", "comment"]

    def clean_comment(self):
        return (self.cleaned_data.get("comment") or "").strip()
