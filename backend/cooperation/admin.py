from django.contrib import admin

from .models import CooperationProduct, CooperationRecord


class CooperationProductInline(admin.TabularInline):
    model = CooperationProduct
    extra = 0


@admin.register(CooperationRecord)
class CooperationRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "influencer", "cooperation_status", "created_by", "created_at")
    list_filter = ("cooperation_status",)
    search_fields = ("influencer__name", "notes")
    inlines = [CooperationProductInline]


@admin.register(CooperationProduct)
class CooperationProductAdmin(admin.ModelAdmin):
    list_display = ("product_name", "product_code", "price", "commission_rate", "cooperation_platform", "cooperation_record")
    list_filter = ("cooperation_platform",)
    search_fields = ("product_name", "product_code", "order_number", "external_number")
