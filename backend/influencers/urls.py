from django.urls import path

from . import views

app_name = "influencers"

urlpatterns = [
    path("export/", views.influencer_export, name="export"),
    path("batch-delete/", views.influencer_batch_delete, name="batch_delete"),
    path("<int:influencer_id>/", views.influencer_detail, name="detail"),
    path("<int:influencer_id>/edit/", views.influencer_edit, name="edit"),
    path("<int:influencer_id>/delete/", views.influencer_delete, name="delete"),
]
