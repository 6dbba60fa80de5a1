from django.urls import path

from . import views

app_name = "contacts"

urlpatterns = [
    path("export/", views.contact_record_export, name="export"),
    path("<int:record_id>/edit/", views.contact_record_edit, name="edit"),
    path("<int:record_id>/delete/", views.contact_record_delete, name="delete"),
    path("<int:record_id>/follow-up/", views.contact_record_follow_up, name="follow_up"),
]
