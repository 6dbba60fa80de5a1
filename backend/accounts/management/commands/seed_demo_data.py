from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from accounts.models import Role, User
from contacts.models import ContactRecord
from cooperation.models import CooperationProduct, CooperationRecord
from influencers.models import Influencer
from menus.defaults import install_defaults

DEMO_INFLUENCERS = [
    {
        "name": "Demo Lin Xiao",
        "nickname": "xiaolin_daily",
        "wechat": "demo_linxiao",
        "douyin_url": "https://www.douyin.com/user/demo-linxiao",
        "douyin_followers": 182000,
        "xiaohongshu_url": "https://www.xiaohongshu.com/user/profile/demo-linxiao",
        "xiaohongshu_followers": 56000,
        "cooperation_price": Decimal("8000.00"),
        "cooperation_types": [Influencer.CooperationType.AD_PLACEMENT, Influencer.CooperationType.PRODUCT_TRIAL],
        "is_refund": True,
    },
    {
        "name": "Demo Zhou Mei",
        "nickname": "meimei_cooks",
        "wechat": "demo_zhoumei",
        "wechat_channels_url": "https://channels.weixin.qq.com/demo-zhoumei",
        "wechat_channels_followers": 43000,
        "wechat_channels_has_shop": True,
        "cooperation_price": Decimal("3500.00"),
        "cooperation_types": [Influencer.CooperationType.LIVE_COMMERCE],
    },
    {
        "name": "Demo Chen Hao",
        "nickname": "haohao_tech",
        "email": "chenhao@example.com",
        "douyin_url": "https://www.douyin.com/user/demo-chenhao",
        "douyin_followers": 920000,
        "cooperation_price": Decimal("25000.00"),
        "cooperation_types": [Influencer.CooperationType.ENDORSEMENT],
    },
]


class Command(BaseCommand):
    help = "Seed demo influencers with contact history and cooperation records."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Reset demo influencers and their records before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options.get("reset"):
            CooperationRecord.objects.filter(influencer__name__startswith="Demo ").delete()
            Influencer.objects.filter(name__startswith="Demo ").delete()
            self.stdout.write(self.style.WARNING("Existing demo data reset."))

        install_defaults()
        admin = User.objects.filter(is_superuser=True).order_by("id").first()
        if not admin:
            admin = User.objects.create_user(
                username="admin",
                password="admin123",
                full_name="System Admin",
                is_staff=True,
                is_superuser=True,
            )
            admin.roles.add(*Role.objects.filter(code="admin"))
            self.stdout.write(self.style.SUCCESS("Created default admin user: admin / admin123"))

        operator, created = User.objects.get_or_create(
            username="operator",
            defaults={"full_name": "Demo Operator"},
        )
        if created:
            operator.set_password("operator123")
            operator.save()
            operator.roles.add(*Role.objects.filter(code="operator"))
            self.stdout.write(self.style.SUCCESS("Created demo operator user: operator / operator123"))

        now = timezone.now()
        for index, payload in enumerate(DEMO_INFLUENCERS):
            influencer, _created = Influencer.objects.update_or_create(
                name=payload["name"],
                defaults={**payload, "created_by": admin},
            )
            if influencer.contact_records.exists():
                continue

            ContactRecord.objects.create(
                influencer=influencer,
                contact_date=now - timedelta(days=10 - index),
                contact_type=ContactRecord.ContactType.INITIAL,
                contact_method=ContactRecord.ContactMethod.WECHAT,
                contact_content="Introduced the brand and shared the product brief.",
                contact_result=ContactRecord.ContactResult.SUCCESSFUL,
                created_by=operator,
            )
            ContactRecord.objects.create(
                influencer=influencer,
                contact_date=now - timedelta(days=3 - index),
                contact_type=ContactRecord.ContactType.NEGOTIATION,
                contact_method=ContactRecord.ContactMethod.PHONE,
                contact_content="Discussed pricing and posting schedule.",
                contact_result=ContactRecord.ContactResult.PENDING,
                follow_up_required=ContactRecord.FollowUp.YES,
                follow_up_date=timezone.localdate() + timedelta(days=index - 1),
                created_by=operator,
            )

            record = CooperationRecord.objects.create(
                influencer=influencer,
                cooperation_status=[
                    CooperationRecord.Status.IN_PROGRESS,
                    CooperationRecord.Status.CONFIRMED,
                    CooperationRecord.Status.PENDING,
                ][index % 3],
                notes="Demo cooperation",
                created_by=operator,
            )
            CooperationProduct.objects.create(
                cooperation_record=record,
                product_name=f"Demo Product {index + 1}",
                product_code=f"DEMO-SKU-{index + 1:03d}",
                price=Decimal("199.00") + index * 100,
                commission_rate=Decimal("20.00"),
                cooperation_platform=CooperationProduct.Platform.DOUYIN,
                order_number=f"DEMO-ORD-{index + 1:04d}",
                cooperation_time=now - timedelta(days=1),
            )

        self.stdout.write(self.style.SUCCESS(f"Demo data ready for {len(DEMO_INFLUENCERS)} influencers."))
