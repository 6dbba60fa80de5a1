from django.urls import path

from . import views

app_name = "accounts"

# The user, role and permission pages themselves are opened through their
# menu paths; only their sub-actions are routed here.
urlpatterns = [
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
    path("system/users/<int:user_id>/edit/", views.user_edit, name="user_edit"),
    path("system/users/<int:user_id>/deactivate/", views.deactivate_user, name="deactivate_user"),
    path("system/users/<int:user_id>/delete/", views.delete_user, name="delete_user"),
    path("system/roles/<int:role_id>/edit/", views.role_edit, name="role_edit"),
    path("system/roles/<int:role_id>/delete/", views.role_delete, name="role_delete"),
    path("system/permissions/<int:permission_id>/edit/", views.permission_edit, name="permission_edit"),
    path("system/permissions/<int:permission_id>/delete/", views.permission_delete, name="permission_delete"),
]
