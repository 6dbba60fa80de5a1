from __future__ import annotations

from django.contrib import messages
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods

from accounts.permissions import COOPERATION_EXPORT, COOPERATION_MANAGE, has_permission, require_permission
from influencers.models import Influencer
from menus.guards import page_action, page_url
from menus.registry import PageComponent

from .exports import cooperation_record_to_excel, cooperation_record_to_pdf
from .forms import CooperationProductFormSet, CooperationRecordForm
from .models import CooperationProduct, CooperationRecord

PRODUCT_PREFIX = "products"


def _save_record(form, formset, *, created_by=None) -> CooperationRecord:
    with transaction.atomic():
        record = form.save(commit=False)
        if created_by is not None and record.created_by_id is None:
            record.created_by = created_by
        record.save()
        formset.instance = record
        formset.save()
    return record


def _status_distribution(queryset) -> list[dict]:
    counts = dict(queryset.order_by().values_list("cooperation_status").annotate(total=Count("id")))
    return [
        {"value": value, "label": label, "count": counts.get(value, 0)}
        for value, label in CooperationRecord.Status.choices
    ]


@require_http_methods(["GET", "POST"])
def cooperation_record_list_create(request):
    page = page_url(request, PageComponent.COOPERATION_RECORD_MANAGEMENT)
    is_post = request.method == "POST"
    form = CooperationRecordForm(request.POST if is_post else None)
    formset = CooperationProductFormSet(request.POST if is_post else None, prefix=PRODUCT_PREFIX)
    show_create_modal = False

    if is_post:
        denied = require_permission(request, COOPERATION_MANAGE, redirect_to=page, area="cooperation records")
        if denied:
            return denied

        if form.is_valid() and formset.is_valid():
            record = _save_record(form, formset, created_by=request.user)
            messages.success(request, f"Cooperation with {record.influencer.name} saved.")
            return redirect(page)
        show_create_modal = True

    q_filter = request.GET.get("q", "").strip()
    status_filter = request.GET.get("status", "").strip()
    influencer_filter = request.GET.get("influencer", "").strip()

    records_qs = CooperationRecord.objects.select_related("influencer", "created_by").prefetch_related("products")
    if q_filter:
        records_qs = records_qs.filter(
            Q(influencer__name__icontains=q_filter)
            | Q(notes__icontains=q_filter)
            | Q(products__product_name__icontains=q_filter)
            | Q(products__order_number__icontains=q_filter)
        ).distinct()
    if status_filter.isdigit() and int(status_filter) in CooperationRecord.Status.values:
        records_qs = records_qs.filter(cooperation_status=int(status_filter))
    if influencer_filter.isdigit():
        records_qs = records_qs.filter(influencer_id=int(influencer_filter))

    paginator = Paginator(records_qs.order_by("-id"), 20)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "form": form,
        "formset": formset,
        "records": page_obj.object_list,
        "page_obj": page_obj,
        "status_distribution": _status_distribution(CooperationRecord.objects.all()),
        "can_manage": has_permission(request.user, COOPERATION_MANAGE),
        "can_export": has_permission(request.user, COOPERATION_EXPORT),
        "show_create_modal": show_create_modal,
        "status_choices": CooperationRecord.Status.choices,
        "influencers": Influencer.objects.order_by("name").only("id", "name"),
        "filter_values": {"q": q_filter, "status": status_filter, "influencer": influencer_filter},
    }
    return render(request, "cooperation/cooperation_records.html", context)


@page_action(PageComponent.COOPERATION_RECORD_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def cooperation_record_edit(request, record_id: int):
    page = page_url(request, PageComponent.COOPERATION_RECORD_MANAGEMENT)
    denied = require_permission(request, COOPERATION_MANAGE, redirect_to=page, area="cooperation records")
    if denied:
        return denied

    record = get_object_or_404(CooperationRecord, pk=record_id)
    is_post = request.method == "POST"
    form = CooperationRecordForm(request.POST if is_post else None, instance=record)
    formset = CooperationProductFormSet(request.POST if is_post else None, instance=record, prefix=PRODUCT_PREFIX)
    if is_post and form.is_valid() and formset.is_valid():
        _save_record(form, formset)
        messages.success(request, "Cooperation record updated successfully.")
        return redirect(page)

    return render(
        request,
        "cooperation/cooperation_record_edit.html",
        {"form": form, "formset": formset, "record": record, "page_path": page},
    )


@page_action(PageComponent.COOPERATION_RECORD_MANAGEMENT)
@require_http_methods(["POST"])
def cooperation_record_delete(request, record_id: int):
    page = page_url(request, PageComponent.COOPERATION_RECORD_MANAGEMENT)
    denied = require_permission(request, COOPERATION_MANAGE, redirect_to=page, area="cooperation records")
    if denied:
        return denied

    record = get_object_or_404(CooperationRecord, pk=record_id)
    record.delete()
    messages.success(request, "Cooperation record deleted successfully.")
    return redirect(page)


def _export_response(content: bytes, *, content_type: str, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type=content_type)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@page_action(PageComponent.COOPERATION_RECORD_MANAGEMENT)
@require_http_methods(["GET"])
def export_cooperation_excel(request, record_id: int):
    page = page_url(request, PageComponent.COOPERATION_RECORD_MANAGEMENT)
    denied = require_permission(request, COOPERATION_EXPORT, redirect_to=page, area="cooperation records", action="export")
    if denied:
        return denied

    record = get_object_or_404(CooperationRecord.objects.select_related("influencer"), pk=record_id)
    return _export_response(
        cooperation_record_to_excel(record),
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename=f"cooperation_{record.id}.xlsx",
    )


@page_action(PageComponent.COOPERATION_RECORD_MANAGEMENT)
@require_http_methods(["GET"])
def export_cooperation_pdf(request, record_id: int):
    page = page_url(request, PageComponent.COOPERATION_RECORD_MANAGEMENT)
    denied = require_permission(request, COOPERATION_EXPORT, redirect_to=page, area="cooperation records", action="export")
    if denied:
        return denied

    record = get_object_or_404(CooperationRecord.objects.select_related("influencer"), pk=record_id)
    return _export_response(
        cooperation_record_to_pdf(record),
        content_type="application/pdf",
        filename=f"cooperation_{record.id}.pdf",
    )


@require_http_methods(["GET"])
def cooperation_product_list(request):
    q_filter = request.GET.get("q", "").strip()
    platform_filter = request.GET.get("platform", "").strip()

    products_qs = CooperationProduct.objects.select_related("cooperation_record__influencer")
    if q_filter:
        products_qs = products_qs.filter(
            Q(product_name__icontains=q_filter)
            | Q(product_code__icontains=q_filter)
            | Q(order_number__icontains=q_filter)
            | Q(external_number__icontains=q_filter)
            | Q(cooperation_record__influencer__name__icontains=q_filter)
        )
    if platform_filter in CooperationProduct.Platform.values:
        products_qs = products_qs.filter(cooperation_platform=platform_filter)

    paginator = Paginator(products_qs.order_by("-id"), 25)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "products": page_obj.object_list,
        "page_obj": page_obj,
        "can_manage": has_permission(request.user, COOPERATION_MANAGE),
        "platform_choices": CooperationProduct.Platform.choices,
        "filter_values": {"q": q_filter, "platform": platform_filter},
    }
    return render(request, "cooperation/cooperation_products.html", context)


@page_action(PageComponent.COOPERATION_PRODUCT_MANAGEMENT)
@require_http_methods(["POST"])
def cooperation_product_delete(request, product_id: int):
    page = page_url(request, PageComponent.COOPERATION_PRODUCT_MANAGEMENT)
    denied = require_permission(request, COOPERATION_MANAGE, redirect_to=page, area="cooperation products")
    if denied:
        return denied

    product = get_object_or_404(CooperationProduct, pk=product_id)
    product.delete()
    messages.success(request, "Cooperation product deleted successfully.")
    return redirect(page)
