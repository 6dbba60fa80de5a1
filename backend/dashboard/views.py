from __future__ import annotations

from datetime import timedelta

from django.shortcuts import render
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from contacts.models import ContactRecord
from cooperation.models import CooperationRecord
from influencers.models import Influencer


@require_http_methods(["GET"])
def home(request):
    today = timezone.localdate()
    week_start = timezone.now() - timedelta(days=7)

    total_influencers = Influencer.objects.count()
    new_influencers = Influencer.objects.filter(created_at__gte=week_start).count()
    contacts_this_week = ContactRecord.objects.filter(contact_date__gte=week_start).count()
    pending_follow_ups = ContactRecord.objects.filter(follow_up_required=ContactRecord.FollowUp.YES)
    overdue_follow_ups = pending_follow_ups.filter(follow_up_date__lt=today).count()
    active_cooperations = CooperationRecord.objects.filter(
        cooperation_status__in=[CooperationRecord.Status.CONFIRMED, CooperationRecord.Status.IN_PROGRESS]
    ).count()
    completed_cooperations = CooperationRecord.objects.filter(cooperation_status=CooperationRecord.Status.COMPLETED).count()
    recent_influencers = Influencer.objects.select_related("created_by").order_by("-created_at", "-id")[:8]
    upcoming_follow_ups = pending_follow_ups.select_related("influencer").order_by("follow_up_date", "id")[:8]

    context = {
        "total_influencers": total_influencers,
        "new_influencers": new_influencers,
        "contacts_this_week": contacts_this_week,
        "pending_follow_up_count": pending_follow_ups.count(),
        "overdue_follow_ups": overdue_follow_ups,
        "active_cooperations": active_cooperations,
        "completed_cooperations": completed_cooperations,
        "recent_influencers": recent_influencers,
        "upcoming_follow_ups": upcoming_follow_ups,
        "today": today,
    }
    return render(request, "dashboard/home.html", context)
