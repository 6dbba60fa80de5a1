from django import forms

from influencers.models import Influencer

from .models import ContactRecord


class ContactRecordForm(forms.ModelForm):
    class Meta:
        model = ContactRecord
        fields = [
            "influencer",
            "contact_date",
            "contact_type",
            "contact_method",
            "contact_person",
            "contact_content",
            "contact_result",
            "follow_up_required",
            "follow_up_date",
            "follow_up_notes",
        ]
        widgets = {
            "influencer": forms.Select(attrs={"class": "form-select"}),
            "contact_date": forms.DateTimeInput(
                attrs={"class": "form-control", "type": "datetime-local"},
                format="%Y-%m-%dT%H:%M",
            ),
            "contact_type": forms.Select(attrs={"class": "form-select"}),
            "contact_method": forms.Select(attrs={"class": "form-select"}),
            "contact_person": forms.TextInput(attrs={"class": "form-control"}),
            "contact_content": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
            "contact_result": forms.Select(attrs={"class": "form-select"}),
            "follow_up_required": forms.Select(attrs={"class": "form-select"}),
            "follow_up_date": forms.DateInput(attrs={"class": "form-control", "type": "date"}, format="%Y-%m-%d"),
            "follow_up_notes": forms.Textarea(attrs={"class": "form-control", "rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["influencer"].queryset = Influencer.objects.order_by("name")

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("follow_up_required") == ContactRecord.FollowUp.YES and not cleaned_data.get("follow_up_date"):
            self.add_error("follow_up_date", "Set a follow-up date.")
        return cleaned_data


class FollowUpCompleteForm(forms.Form):
    notes = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
