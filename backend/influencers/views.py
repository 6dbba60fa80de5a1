from __future__ import annotations

import logging

from django.contrib import messages
from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.db.models.deletion import ProtectedError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from accounts.permissions import INFLUENCER_EXPORT, INFLUENCER_MANAGE, has_permission, require_permission
from contacts.models import contact_record_stats
from menus.guards import page_action, page_url
from menus.registry import PageComponent

from .exports import influencers_to_excel
from .forms import InfluencerForm
from .models import Influencer

logger = logging.getLogger(__name__)

INFLUENCER_PAGES = (PageComponent.INFLUENCER_MANAGEMENT, PageComponent.EXPERT_MANAGEMENT)


def _get_sorting(sort_key: str, direction: str):
    sort_map = {
        "name": "name",
        "nickname": "nickname",
        "douyin": "douyin_followers",
        "xiaohongshu": "xiaohongshu_followers",
        "channels": "wechat_channels_followers",
        "price": "cooperation_price",
        "created": "created_at",
    }
    resolved_key = sort_key if sort_key in sort_map else "created"
    default_direction = "desc" if resolved_key == "created" else "asc"
    resolved_direction = direction if direction in {"asc", "desc"} else default_direction
    order_field = sort_map[resolved_key]
    if resolved_direction == "desc":
        order_field = f"-{order_field}"
    return resolved_key, resolved_direction, order_field


def _build_sort_state(active_sort: str, active_direction: str):
    keys = ["name", "nickname", "douyin", "xiaohongshu", "channels", "price", "created"]
    state: dict[str, dict[str, str | bool]] = {}
    for key in keys:
        is_active = key == active_sort
        next_direction = "desc" if is_active and active_direction == "asc" else "asc"
        icon = "↑" if is_active and active_direction == "asc" else "↓" if is_active else "↕"
        state[key] = {"active": is_active, "next": next_direction, "icon": icon}
    return state


def _filter_influencers(params):
    q_filter = params.get("q", "").strip()
    platform_filter = params.get("platform", "").strip()
    type_filter = params.get("cooperation_type", "").strip()
    refund_filter = params.get("refund", "").strip()

    influencers_qs = Influencer.objects.all()
    if q_filter:
        influencers_qs = influencers_qs.filter(
            Q(name__icontains=q_filter)
            | Q(nickname__icontains=q_filter)
            | Q(wechat__icontains=q_filter)
            | Q(email__icontains=q_filter)
        )
    if platform_filter in Influencer.Platform.values:
        influencers_qs = influencers_qs.exclude(**{f"{platform_filter}_url": ""})
    if type_filter in Influencer.CooperationType.values:
        influencers_qs = influencers_qs.filter(cooperation_types__icontains=f'"{type_filter}"')
    if refund_filter in {"yes", "no"}:
        influencers_qs = influencers_qs.filter(is_refund=refund_filter == "yes")

    filter_values = {
        "q": q_filter,
        "platform": platform_filter,
        "cooperation_type": type_filter,
        "refund": refund_filter,
    }
    return influencers_qs, filter_values


@require_http_methods(["GET", "POST"])
def influencer_list_create(request):
    page = page_url(request, *INFLUENCER_PAGES)
    form = InfluencerForm(request.POST or None)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, INFLUENCER_MANAGE, redirect_to=page, area="influencers")
        if denied:
            return denied

        if form.is_valid():
            influencer = form.save(commit=False)
            influencer.created_by = request.user
            influencer.save()
            messages.success(request, f"Influencer {influencer.name} saved successfully.")
            return redirect(page)
        show_create_modal = True

    sort_key, sort_direction, order_field = _get_sorting(
        request.GET.get("sort", ""),
        request.GET.get("direction", ""),
    )
    influencers_qs, filter_values = _filter_influencers(request.GET)
    influencers_qs = influencers_qs.annotate(contact_count=Count("contact_records")).order_by(order_field, "-id")
    paginator = Paginator(influencers_qs, 20)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "form": form,
        "influencers": page_obj.object_list,
        "page_obj": page_obj,
        "can_manage": has_permission(request.user, INFLUENCER_MANAGE),
        "can_export": has_permission(request.user, INFLUENCER_EXPORT),
        "show_create_modal": show_create_modal,
        "sort_key": sort_key,
        "sort_direction": sort_direction,
        "sort_state": _build_sort_state(sort_key, sort_direction),
        "platform_choices": Influencer.Platform.choices,
        "cooperation_type_choices": Influencer.CooperationType.choices,
        "filter_values": filter_values,
    }
    return render(request, "influencers/influencers.html", context)


@page_action(*INFLUENCER_PAGES)
@require_http_methods(["GET"])
def influencer_detail(request, influencer_id: int):
    influencer = get_object_or_404(Influencer.objects.select_related("created_by"), pk=influencer_id)
    contact_records = influencer.contact_records.select_related("created_by").order_by("-contact_date", "-id")
    context = {
        "influencer": influencer,
        "contact_records": contact_records[:50],
        "contact_stats": contact_record_stats(influencer.contact_records.all()),
        "cooperation_records": influencer.cooperation_records.prefetch_related("products").order_by("-id"),
        "can_manage": has_permission(request.user, INFLUENCER_MANAGE),
        "page_path": page_url(request, *INFLUENCER_PAGES),
    }
    return render(request, "influencers/influencer_detail.html", context)


@page_action(*INFLUENCER_PAGES)
@require_http_methods(["GET", "POST"])
def influencer_edit(request, influencer_id: int):
    page = page_url(request, *INFLUENCER_PAGES)
    denied = require_permission(request, INFLUENCER_MANAGE, redirect_to=page, area="influencers")
    if denied:
        return denied

    influencer = get_object_or_404(Influencer, pk=influencer_id)
    form = InfluencerForm(request.POST or None, instance=influencer)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Influencer updated successfully.")
        return redirect(page)

    return render(
        request,
        "influencers/influencer_edit.html",
        {"form": form, "influencer": influencer, "page_path": page},
    )


@page_action(*INFLUENCER_PAGES)
@require_http_methods(["POST"])
def influencer_delete(request, influencer_id: int):
    page = page_url(request, *INFLUENCER_PAGES)
    denied = require_permission(request, INFLUENCER_MANAGE, redirect_to=page, area="influencers")
    if denied:
        return denied

    influencer = get_object_or_404(Influencer, pk=influencer_id)
    try:
        influencer.delete()
        messages.success(request, "Influencer deleted successfully.")
    except ProtectedError:
        messages.error(request, "Influencer cannot be deleted because it has cooperation records.")
    return redirect(page)


@page_action(*INFLUENCER_PAGES)
@require_http_methods(["POST"])
def influencer_batch_delete(request):
    page = page_url(request, *INFLUENCER_PAGES)
    denied = require_permission(request, INFLUENCER_MANAGE, redirect_to=page, area="influencers")
    if denied:
        return denied

    ids = [value for value in request.POST.getlist("ids") if value.isdigit()]
    if not ids:
        messages.error(request, "Select at least one influencer.")
        return redirect(page)

    deleted_count = 0
    skipped: list[str] = []
    for influencer in Influencer.objects.filter(pk__in=ids):
        try:
            influencer.delete()
            deleted_count += 1
        except ProtectedError:
            skipped.append(influencer.name)

    if deleted_count:
        messages.success(request, f"Deleted {deleted_count} influencer(s).")
    if skipped:
        messages.error(request, f"Skipped influencers with cooperation records: {', '.join(skipped)}.")
    logger.info("User %s batch deleted %s influencers, skipped %s.", request.user.pk, deleted_count, len(skipped))
    return redirect(page)


@page_action(*INFLUENCER_PAGES)
@require_http_methods(["GET"])
def influencer_export(request):
    page = page_url(request, *INFLUENCER_PAGES)
    denied = require_permission(request, INFLUENCER_EXPORT, redirect_to=page, area="influencers", action="export")
    if denied:
        return denied

    influencers_qs, _filter_values = _filter_influencers(request.GET)
    content = influencers_to_excel(influencers_qs.order_by("-created_at", "-id"))
    response = HttpResponse(
        content,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    response["Content-Disposition"] = f'attachment; filename="influencers_{timezone.localdate().isoformat()}.xlsx"'
    return response
