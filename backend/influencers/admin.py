from django.contrib import admin

from .models import Influencer


@admin.register(Influencer)
class InfluencerAdmin(admin.ModelAdmin):
    list_display = ("name", "nickname", "wechat", "douyin_followers", "xiaohongshu_followers", "cooperation_price", "is_refund")
    search_fields = ("name", "nickname", "wechat", "email")
    list_filter = ("is_refund", "wechat_channels_has_shop")
