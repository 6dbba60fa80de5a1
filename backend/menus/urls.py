from django.urls import path, re_path

from . import views

app_name = "menus"

urlpatterns = [
    path("", views.home, name="home"),
    path("api/menus/user-tree/", views.user_menu_tree_api, name="user_tree_api"),
    path("api/menus/tree/", views.menu_tree_api, name="tree_api"),
    path("system/menus/<int:menu_id>/edit/", views.menu_edit, name="edit"),
    path("system/menus/<int:menu_id>/delete/", views.menu_delete, name="delete"),
    re_path(r"^(?P<page_path>.+)$", views.dispatch_page, name="page"),
]
