from django.urls import path

from . import views

app_name = "cooperation"

urlpatterns = [
    path("<int:record_id>/edit/", views.cooperation_record_edit, name="edit"),
    path("<int:record_id>/delete/", views.cooperation_record_delete, name="delete"),
    path("<int:record_id>/export/excel/", views.export_cooperation_excel, name="export_excel"),
    path("<int:record_id>/export/pdf/", views.export_cooperation_pdf, name="export_pdf"),
    path("products/<int:product_id>/delete/", views.cooperation_product_delete, name="delete_product"),
]
