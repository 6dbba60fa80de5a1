from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from influencers.models import Influencer


class CooperationRecord(models.Model):
    class Status(models.IntegerChoices):
        PENDING = 0, "Pending confirmation"
        CONFIRMED = 1, "Confirmed"
        IN_PROGRESS = 2, "In progress"
        COMPLETED = 3, "Completed"
        CANCELLED = 4, "Cancelled"

    influencer = models.ForeignKey(Influencer, on_delete=models.PROTECT, related_name="cooperation_records")
    cooperation_status = models.PositiveSmallIntegerField(choices=Status.choices, default=Status.PENDING)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cooperation_records",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self) -> str:
        return f"COOP-{self.id} ({self.influencer.name})"

    @property
    def is_closed(self) -> bool:
        return self.cooperation_status in {self.Status.COMPLETED, self.Status.CANCELLED}

    @property
    def total_amount(self) -> Decimal:
        return sum((product.price or Decimal("0") for product in self.products.all()), Decimal("0.00"))


class CooperationProduct(models.Model):
    class Platform(models.TextChoices):
        DOUYIN = "douyin", "Douyin"
        XIAOHONGSHU = "xiaohongshu", "Xiaohongshu"
        WECHAT_CHANNELS = "wechat_channels", "WeChat Channels"
        OTHER = "other", "Other"

    cooperation_record = models.ForeignKey(CooperationRecord, on_delete=models.CASCADE, related_name="products")
    product_name = models.CharField(max_length=150)
    product_code = models.CharField(max_length=64, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Percent of the sale price.",
    )
    cooperation_platform = models.CharField(max_length=20, choices=Platform.choices, blank=True)
    order_number = models.CharField(max_length=64, blank=True)
    external_number = models.CharField(max_length=64, blank=True)
    cooperation_time = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.product_name

    @property
    def commission_amount(self) -> Decimal | None:
        if self.price is None or self.commission_rate is None:
            return None
        return (self.price * self.commission_rate / Decimal("100")).quantize(Decimal("0.01"))
