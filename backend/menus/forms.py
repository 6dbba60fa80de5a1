from django import forms

from .models import Menu
from .registry import PageComponent
from .routing import normalize_path


class MenuForm(forms.ModelForm):
    component = forms.ChoiceField(
        choices=[("", "---------"), *PageComponent.choices],
        required=False,
        widget=forms.Select(attrs={"class": "form-select"}),
    )

    class Meta:
        model = Menu
        fields = [
            "name",
            "title",
            "parent",
            "path",
            "component",
            "icon",
            "menu_type",
            "sort_order",
            "is_hidden",
            "is_active",
            "description",
        ]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "title": forms.TextInput(attrs={"class": "form-control"}),
            "parent": forms.Select(attrs={"class": "form-select"}),
            "path": forms.TextInput(attrs={"class": "form-control", "placeholder": "/influencers"}),
            "icon": forms.TextInput(attrs={"class": "form-control", "placeholder": "TeamOutlined"}),
            "menu_type": forms.Select(attrs={"class": "form-select"}),
            "sort_order": forms.NumberInput(attrs={"class": "form-control"}),
            "is_hidden": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "description": forms.TextInput(attrs={"class": "form-control"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Rows saved before a component was retired must stay editable.
        current = self.instance.component if self.instance.pk else ""
        if current and current not in PageComponent.values:
            self.fields["component"].choices = [*self.fields["component"].choices, (current, f"{current} (unknown)")]
        self.fields["parent"].queryset = Menu.objects.exclude(pk=self.instance.pk).order_by("sort_order", "id")

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_path(self):
        path = self.cleaned_data["path"].strip()
        if not path:
            return ""
        path = normalize_path(path)
        if path == "/":
            raise forms.ValidationError("The root path is reserved for the default page.")
        if path.startswith(("/api/", "/admin/", "/login", "/logout", "/static/")):
            raise forms.ValidationError("This path is reserved by the console.")
        return path

    def clean_parent(self):
        parent = self.cleaned_data.get("parent")
        if parent is not None and self.instance.pk:
            if parent.pk == self.instance.pk or self.instance.pk in parent.ancestor_ids():
                raise forms.ValidationError("A menu cannot be nested under itself.")
        return parent

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("component") and not cleaned_data.get("path"):
            self.add_error("path", "A menu that opens a page needs a path.")
        return cleaned_data
