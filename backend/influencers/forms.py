from django import forms

from .models import Influencer


class InfluencerForm(forms.ModelForm):
    cooperation_types = forms.MultipleChoiceField(
        choices=Influencer.CooperationType.choices,
        required=False,
        widget=forms.CheckboxSelectMultiple(),
    )

    class Meta:
        model = Influencer
        fields = [
            "name",
            "nickname",
            "email",
            "wechat",
            "douyin_url",
            "douyin_followers",
            "xiaohongshu_url",
            "xiaohongshu_followers",
            "wechat_channels_url",
            "wechat_channels_followers",
            "wechat_channels_has_shop",
            "cooperation_price",
            "cooperation_types",
            "is_refund",
            "description",
            "internal_notes",
        ]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "nickname": forms.TextInput(attrs={"class": "form-control"}),
            "email": forms.EmailInput(attrs={"class": "form-control"}),
            "wechat": forms.TextInput(attrs={"class": "form-control"}),
            "douyin_url": forms.URLInput(attrs={"class": "form-control"}),
            "douyin_followers": forms.NumberInput(attrs={"class": "form-control", "min": "0"}),
            "xiaohongshu_url": forms.URLInput(attrs={"class": "form-control"}),
            "xiaohongshu_followers": forms.NumberInput(attrs={"class": "form-control", "min": "0"}),
            "wechat_channels_url": forms.URLInput(attrs={"class": "form-control"}),
            "wechat_channels_followers": forms.NumberInput(attrs={"class": "form-control", "min": "0"}),
            "wechat_channels_has_shop": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "cooperation_price": forms.NumberInput(attrs={"class": "form-control", "step": "0.01", "min": "0"}),
            "is_refund": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "description": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
            "internal_notes": forms.Textarea(attrs={"class": "form-control", "rows": 3}),
        }

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_cooperation_price(self):
        price = self.cleaned_data.get("cooperation_price")
        if price is not None and price < 0:
            raise forms.ValidationError("Cooperation price cannot be negative.")
        return price

    def clean(self):
        cleaned_data = super().clean()
        for platform in ("douyin", "xiaohongshu", "wechat_channels"):
            if cleaned_data.get(f"{platform}_followers") and not cleaned_data.get(f"{platform}_url"):
                self.add_error(f"{platform}_url", "Add the account link for these followers.")
        return cleaned_data
