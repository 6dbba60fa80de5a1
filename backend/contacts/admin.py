from django.contrib import admin

from .models import ContactRecord


@admin.register(ContactRecord)
class ContactRecordAdmin(admin.ModelAdmin):
    list_display = ("contact_date", "influencer", "contact_type", "contact_method", "contact_result", "follow_up_required")
    list_filter = ("contact_type", "contact_result", "follow_up_required")
    search_fields = ("influencer__name", "contact_person", "contact_content")
    autocomplete_fields = ("influencer",)
