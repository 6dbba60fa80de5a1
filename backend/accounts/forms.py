from django import forms
from django.contrib.auth.forms import AuthenticationForm

from menus.models import Menu

from .models import Permission, Role, User


class LoginForm(AuthenticationForm):
    username = forms.CharField(widget=forms.TextInput(attrs={"class": "form-control", "autofocus": True}))
    password = forms.CharField(widget=forms.PasswordInput(attrs={"class": "form-control"}))


class _RoleChoiceMixin:
    def _limit_roles(self):
        self.fields["roles"].queryset = Role.objects.order_by("id")
        self.fields["roles"].required = False


class UserCreateForm(_RoleChoiceMixin, forms.ModelForm):
    password = forms.CharField(min_length=6, widget=forms.PasswordInput(attrs={"class": "form-control"}))

    class Meta:
        model = User
        fields = ["username", "full_name", "email", "roles", "is_active", "is_superuser", "password"]
        widgets = {
            "username": forms.TextInput(attrs={"class": "form-control"}),
            "full_name": forms.TextInput(attrs={"class": "form-control"}),
            "email": forms.EmailInput(attrs={"class": "form-control"}),
            "roles": forms.CheckboxSelectMultiple(),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "is_superuser": forms.CheckboxInput(attrs={"class": "form-check-input"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._limit_roles()

    def save(self, commit: bool = True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
            self.save_m2m()
        return user


class UserUpdateForm(_RoleChoiceMixin, forms.ModelForm):
    new_password = forms.CharField(
        min_length=6,
        required=False,
        help_text="Leave blank to keep the current password.",
        widget=forms.PasswordInput(attrs={"class": "form-control"}),
    )

    class Meta:
        model = User
        fields = ["full_name", "email", "roles", "is_active", "is_superuser"]
        widgets = {
            "full_name": forms.TextInput(attrs={"class": "form-control"}),
            "email": forms.EmailInput(attrs={"class": "form-control"}),
            "roles": forms.CheckboxSelectMultiple(),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "is_superuser": forms.CheckboxInput(attrs={"class": "form-check-input"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._limit_roles()

    def save(self, commit: bool = True):
        user = super().save(commit=False)
        if self.cleaned_data.get("new_password"):
            user.set_password(self.cleaned_data["new_password"])
        if commit:
            user.save()
            self.save_m2m()
        return user


class RoleForm(forms.ModelForm):
    class Meta:
        model = Role
        fields = ["name", "code", "description", "is_active", "menus", "permissions"]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "code": forms.TextInput(attrs={"class": "form-control"}),
            "description": forms.TextInput(attrs={"class": "form-control"}),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "menus": forms.CheckboxSelectMultiple(),
            "permissions": forms.CheckboxSelectMultiple(),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["menus"].queryset = Menu.objects.order_by("sort_order", "id")
        self.fields["permissions"].queryset = Permission.objects.filter(is_active=True)

    def clean_code(self):
        return self.cleaned_data["code"].strip().lower()


class PermissionForm(forms.ModelForm):
    class Meta:
        model = Permission
        fields = [
            "name",
            "code",
            "permission_type",
            "module",
            "menu",
            "api_path",
            "api_method",
            "is_active",
            "description",
        ]
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control"}),
            "code": forms.TextInput(attrs={"class": "form-control", "placeholder": "influencer:manage"}),
            "permission_type": forms.Select(attrs={"class": "form-select"}),
            "module": forms.TextInput(attrs={"class": "form-control"}),
            "menu": forms.Select(attrs={"class": "form-select"}),
            "api_path": forms.TextInput(attrs={"class": "form-control"}),
            "api_method": forms.TextInput(attrs={"class": "form-control", "style": "text-transform:uppercase"}),
            "is_active": forms.CheckboxInput(attrs={"class": "form-check-input"}),
            "description": forms.TextInput(attrs={"class": "form-control"}),
        }

    def clean_code(self):
        return self.cleaned_data["code"].strip()

    def clean_api_method(self):
        return self.cleaned_data["api_method"].strip().upper()

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("permission_type") == Permission.PermissionType.API and not cleaned_data.get("api_path"):
            self.add_error("api_path", "API permissions need an API path.")
        return cleaned_data
