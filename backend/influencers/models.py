from django.conf import settings
from django.db import models


class Influencer(models.Model):
    class CooperationType(models.TextChoices):
        AD_PLACEMENT = "ad_placement", "Ad placement"
        PRODUCT_TRIAL = "product_trial", "Product trial"
        LIVE_COMMERCE = "live_commerce", "Live commerce"
        ENDORSEMENT = "endorsement", "Brand endorsement"
        EVENT = "event", "Event appearance"

    class Platform(models.TextChoices):
        DOUYIN = "douyin", "Douyin"
        XIAOHONGSHU = "xiaohongshu", "Xiaohongshu"
        WECHAT_CHANNELS = "wechat_channels", "WeChat Channels"

    name = models.CharField(max_length=100)
    nickname = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    wechat = models.CharField(max_length=64, blank=True)
    douyin_url = models.URLField(blank=True)
    douyin_followers = models.PositiveIntegerField(null=True, blank=True)
    xiaohongshu_url = models.URLField(blank=True)
    xiaohongshu_followers = models.PositiveIntegerField(null=True, blank=True)
    wechat_channels_url = models.URLField(blank=True)
    wechat_channels_followers = models.PositiveIntegerField(null=True, blank=True)
    wechat_channels_has_shop = models.BooleanField(default=False)
    cooperation_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cooperation_types = models.JSONField(default=list, blank=True)
    is_refund = models.BooleanField(default=False)
    description = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_influencers",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["name"], name="influencer_name_idx"),
        ]

    def __str__(self) -> str:
        if self.nickname:
            return f"{self.name} ({self.nickname})"
        return self.name

    @property
    def total_followers(self) -> int:
        return sum(
            count or 0
            for count in (self.douyin_followers, self.xiaohongshu_followers, self.wechat_channels_followers)
        )

    @property
    def platforms(self) -> list[str]:
        labels = []
        if self.douyin_url:
            labels.append(self.Platform.DOUYIN.label)
        if self.xiaohongshu_url:
            labels.append(self.Platform.XIAOHONGSHU.label)
        if self.wechat_channels_url:
            labels.append(self.Platform.WECHAT_CHANNELS.label)
        return labels

    @property
    def cooperation_type_labels(self) -> list[str]:
        labels = dict(self.CooperationType.choices)
        return [labels.get(value, value) for value in self.cooperation_types or []]
