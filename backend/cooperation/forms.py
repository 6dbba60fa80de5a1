from django import forms
from django.forms import inlineformset_factory

from influencers.models import Influencer

from .models import CooperationProduct, CooperationRecord


class CooperationRecordForm(forms.ModelForm):
    class Meta:
        model = CooperationRecord
        fields = ["influencer", "cooperation_status", "notes"]
        widgets = {
            "influencer": forms.Select(attrs={"class": "form-select"}),
            "cooperation_status": forms.Select(attrs={"class": "form-select"}),
            "notes": forms.Textarea(attrs={"class": "form-control", "rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["influencer"].queryset = Influencer.objects.order_by("name")


class CooperationProductForm(forms.ModelForm):
    class Meta:
        model = CooperationProduct
        fields = [
            "product_name",
            "product_code",
            "price",
            "commission_rate",
            "cooperation_platform",
            "order_number",
            "external_number",
            "cooperation_time",
        ]
        widgets = {
            "product_name": forms.TextInput(attrs={"class": "form-control form-control-sm"}),
            "product_code": forms.TextInput(attrs={"class": "form-control form-control-sm"}),
            "price": forms.NumberInput(attrs={"class": "form-control form-control-sm", "step": "0.01", "min": "0"}),
            "commission_rate": forms.NumberInput(
                attrs={"class": "form-control form-control-sm", "step": "0.01", "min": "0", "max": "100"}
            ),
            "cooperation_platform": forms.Select(attrs={"class": "form-select form-select-sm"}),
            "order_number": forms.TextInput(attrs={"class": "form-control form-control-sm"}),
            "external_number": forms.TextInput(attrs={"class": "form-control form-control-sm"}),
            "cooperation_time": forms.DateTimeInput(
                attrs={"class": "form-control form-control-sm", "type": "datetime-local"},
                format="%Y-%m-%dT%H:%M",
            ),
        }

    def clean_price(self):
        price = self.cleaned_data.get("price")
        if price is not None and price < 0:
            raise forms.ValidationError("Price cannot be negative.")
        return price


CooperationProductFormSet = inlineformset_factory(
    CooperationRecord,
    CooperationProduct,
    form=CooperationProductForm,
    extra=1,
    can_delete=True,
)
