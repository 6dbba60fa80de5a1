from __future__ import annotations

from datetime import date

from django.contrib import messages
from django.core.paginator import Paginator
from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from accounts.permissions import CONTACT_EXPORT, CONTACT_MANAGE, has_permission, require_permission
from influencers.models import Influencer
from menus.guards import page_action, page_url
from menus.registry import PageComponent

from .exports import contact_records_to_excel
from .forms import ContactRecordForm, FollowUpCompleteForm
from .models import ContactRecord, contact_record_stats, mark_follow_up_completed


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _filter_contact_records(params):
    q_filter = params.get("q", "").strip()
    influencer_filter = params.get("influencer", "").strip()
    type_filter = params.get("contact_type", "").strip()
    result_filter = params.get("contact_result", "").strip()
    follow_up_filter = params.get("follow_up_required", "").strip()
    pending_only = params.get("pending") == "1"
    date_from = params.get("date_from", "").strip()
    date_to = params.get("date_to", "").strip()

    records_qs = ContactRecord.objects.select_related("influencer", "created_by")
    if q_filter:
        records_qs = records_qs.filter(
            Q(contact_content__icontains=q_filter)
            | Q(contact_person__icontains=q_filter)
            | Q(influencer__name__icontains=q_filter)
            | Q(influencer__nickname__icontains=q_filter)
        )
    if influencer_filter.isdigit():
        records_qs = records_qs.filter(influencer_id=int(influencer_filter))
    if type_filter in ContactRecord.ContactType.values:
        records_qs = records_qs.filter(contact_type=type_filter)
    if result_filter in ContactRecord.ContactResult.values:
        records_qs = records_qs.filter(contact_result=result_filter)
    if pending_only:
        records_qs = records_qs.filter(follow_up_required=ContactRecord.FollowUp.YES)
    elif follow_up_filter in ContactRecord.FollowUp.values:
        records_qs = records_qs.filter(follow_up_required=follow_up_filter)

    parsed_from = _parse_date(date_from) if date_from else None
    parsed_to = _parse_date(date_to) if date_to else None
    if parsed_from:
        records_qs = records_qs.filter(contact_date__date__gte=parsed_from)
    if parsed_to:
        records_qs = records_qs.filter(contact_date__date__lte=parsed_to)

    filter_values = {
        "q": q_filter,
        "influencer": influencer_filter,
        "contact_type": type_filter,
        "contact_result": result_filter,
        "follow_up_required": follow_up_filter,
        "pending": "1" if pending_only else "",
        "date_from": date_from,
        "date_to": date_to,
    }
    return records_qs, filter_values


@require_http_methods(["GET", "POST"])
def contact_record_list_create(request):
    page = page_url(request, PageComponent.CONTACT_RECORD_MANAGEMENT)
    initial = {}
    if request.GET.get("influencer", "").isdigit():
        initial["influencer"] = int(request.GET["influencer"])
    form = ContactRecordForm(request.POST or None, initial=initial)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, CONTACT_MANAGE, redirect_to=page, area="contact records")
        if denied:
            return denied

        if form.is_valid():
            record = form.save(commit=False)
            record.created_by = request.user
            record.save()
            messages.success(request, f"Contact with {record.influencer.name} recorded.")
            return redirect(page)
        show_create_modal = True

    records_qs, filter_values = _filter_contact_records(request.GET)
    paginator = Paginator(records_qs.order_by("-contact_date", "-id"), 25)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "form": form,
        "records": page_obj.object_list,
        "page_obj": page_obj,
        "stats": contact_record_stats(records_qs),
        "can_manage": has_permission(request.user, CONTACT_MANAGE),
        "can_export": has_permission(request.user, CONTACT_EXPORT),
        "show_create_modal": show_create_modal,
        "influencers": Influencer.objects.order_by("name").only("id", "name"),
        "contact_type_choices": ContactRecord.ContactType.choices,
        "contact_result_choices": ContactRecord.ContactResult.choices,
        "follow_up_choices": ContactRecord.FollowUp.choices,
        "filter_values": filter_values,
        "today": timezone.localdate(),
    }
    return render(request, "contacts/contact_records.html", context)


@page_action(PageComponent.CONTACT_RECORD_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def contact_record_edit(request, record_id: int):
    page = page_url(request, PageComponent.CONTACT_RECORD_MANAGEMENT)
    denied = require_permission(request, CONTACT_MANAGE, redirect_to=page, area="contact records")
    if denied:
        return denied

    record = get_object_or_404(ContactRecord, pk=record_id)
    form = ContactRecordForm(request.POST or None, instance=record)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Contact record updated successfully.")
        return redirect(page)

    return render(request, "contacts/contact_record_edit.html", {"form": form, "record": record, "page_path": page})


@page_action(PageComponent.CONTACT_RECORD_MANAGEMENT)
@require_http_methods(["POST"])
def contact_record_delete(request, record_id: int):
    page = page_url(request, PageComponent.CONTACT_RECORD_MANAGEMENT)
    denied = require_permission(request, CONTACT_MANAGE, redirect_to=page, area="contact records")
    if denied:
        return denied

    record = get_object_or_404(ContactRecord, pk=record_id)
    record.delete()
    messages.success(request, "Contact record deleted successfully.")
    return redirect(page)


@page_action(PageComponent.CONTACT_RECORD_MANAGEMENT)
@require_http_methods(["POST"])
def contact_record_follow_up(request, record_id: int):
    page = page_url(request, PageComponent.CONTACT_RECORD_MANAGEMENT)
    denied = require_permission(request, CONTACT_MANAGE, redirect_to=page, area="contact records")
    if denied:
        return denied

    record = get_object_or_404(ContactRecord, pk=record_id)
    if not record.is_follow_up_pending:
        messages.error(request, "This contact record has no pending follow-up.")
        return redirect(page)

    form = FollowUpCompleteForm(request.POST)
    notes = form.cleaned_data["notes"].strip() if form.is_valid() else ""
    mark_follow_up_completed(record, notes=notes)
    messages.success(request, "Follow-up marked as completed.")
    return redirect(page)


@page_action(PageComponent.CONTACT_RECORD_MANAGEMENT)
@require_http_methods(["GET"])
def contact_record_export(request):
    page = page_url(request, PageComponent.CONTACT_RECORD_MANAGEMENT)
    denied = require_permission(request, CONTACT_EXPORT, redirect_to=page, area="contact records", action="export")
    if denied:
        return denied

    records_qs, _filter_values = _filter_contact_records(request.GET)
    content = contact_records_to_excel(records_qs.order_by("-contact_date", "-id"))
    response = HttpResponse(
        content,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    response["Content-Disposition"] = f'attachment; filename="contact_records_{timezone.localdate().isoformat()}.xlsx"'
    return response
