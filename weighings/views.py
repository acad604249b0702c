from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect
from django.urls import reverse
from django.utils import timezone
from django.views import generic

from weighings.forms import BackupImportForm, WeighingForm
from weighings.services.deltas import build_history, build_summary, distinct_animal_ids
from weighings.services.repository import ModelWeighingRepository, WeighingRepository
from weighings.services.storage import BackupFormatError, dump_records, load_records

logger = logging.getLogger(__name__)


class WeighingRepositoryMixin:
    """Resolve the repository a view works with.

    ``repository`` may be injected through ``as_view(repository=...)``;
    otherwise a fresh ``repository_class`` instance is used per request.
    """

    repository: Optional[WeighingRepository] = None
    repository_class: type[WeighingRepository] = ModelWeighingRepository

    def get_repository(self) -> WeighingRepository:
        if self.repository is not None:
            return self.repository
        if not hasattr(self, "_repository"):
            self._repository = self.repository_class()
        return self._repository


def dashboard_url(animal_id: str = "") -> str:
    url = reverse("weighings:dashboard")
    animal_id = (animal_id or "").strip()
    if animal_id:
        return f"{url}?{urlencode({'animal': animal_id})}"
    return url


class WeighingDashboardView(WeighingRepositoryMixin, generic.TemplateView):
    template_name = "weighings/dashboard.html"

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        intent = request.POST.get("intent")
        if intent == "create":
            return self._handle_create(request)
        if intent == "delete":
            return self._handle_delete(request)
        if intent == "clear":
            return self._handle_clear(request)
        if intent == "import":
            return self._handle_import(request)
        return redirect(self._redirect_url())

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        records = self.get_repository().list_records()
        animal_filter = self._get_animal_filter()
        history = build_history(records, animal_filter)
        context.update(
            {
                "form": getattr(self, "_form", None) or WeighingForm(),
                "import_form": getattr(self, "_import_form", None) or BackupImportForm(),
                "animal_filter": animal_filter,
                "animal_ids": distinct_animal_ids(records),
                "summary": build_summary(records),
                "history": history,
                "history_ordering_label": "por fecha" if animal_filter else "por ID y fecha",
                "records_count": len(records),
                "export_query_all": urlencode({"scope": "all"}),
                "export_query_filtered": urlencode({"scope": "filtered", "animal": animal_filter}),
            }
        )
        return context

    def _get_animal_filter(self) -> str:
        source = self.request.POST if self.request.method == "POST" else self.request.GET
        return (source.get("animal") or "").strip()

    def _redirect_url(self) -> str:
        return dashboard_url(self._get_animal_filter())

    def _handle_create(self, request: HttpRequest) -> HttpResponse:
        form = WeighingForm(request.POST)
        if not form.is_valid():
            self._form = form
            return self.render_to_response(self.get_context_data(), status=400)
        record = self.get_repository().add(
            animal_id=form.cleaned_data["animal_id"],
            weight_kg=form.cleaned_data["weight_kg"],
            recorded_at=form.cleaned_data["recorded_at"],
        )
        messages.success(request, f"Pesaje registrado para el cerdo {record.animal_id}.")
        return redirect(self._redirect_url())

    def _handle_delete(self, request: HttpRequest) -> HttpResponse:
        identifier = (request.POST.get("weighing_id") or "").strip()
        if not identifier or not self.get_repository().delete(identifier):
            messages.error(request, "No se encontró el registro que intentas eliminar.")
            return redirect(self._redirect_url())
        messages.success(request, "El registro se eliminó correctamente.")
        return redirect(self._redirect_url())

    def _handle_clear(self, request: HttpRequest) -> HttpResponse:
        removed = self.get_repository().clear()
        messages.success(request, f"Se eliminaron {removed} registros.")
        return redirect(dashboard_url())

    def _handle_import(self, request: HttpRequest) -> HttpResponse:
        form = BackupImportForm(request.POST, request.FILES)
        if not form.is_valid():
            self._import_form = form
            return self.render_to_response(self.get_context_data(), status=400)
        uploaded = form.cleaned_data["backup"]
        try:
            result = load_records(uploaded.read())
        except BackupFormatError as exc:
            form.add_error("backup", str(exc))
            self._import_form = form
            return self.render_to_response(self.get_context_data(), status=400)
        restored = self.get_repository().replace_all(result.records)
        messages.success(request, f"Respaldo restaurado: {restored} pesajes.")
        if result.skipped:
            preview = "; ".join(result.skipped[:3])
            if len(result.skipped) > 3:
                preview = f"{preview} …"
            messages.warning(
                request,
                f"{len(result.skipped)} entrada(s) se omitieron durante la restauración. Ejemplos: {preview}",
            )
        return redirect(dashboard_url())


class WeighingBackupView(WeighingRepositoryMixin, generic.View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        records = self.get_repository().list_records()
        stamp = timezone.localdate().isoformat()
        response = HttpResponse(dump_records(records), content_type="application/json; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="pesajes_respaldo_{stamp}.json"'
        logger.info("Respaldo descargado con %s pesajes.", len(records))
        return response


weighing_dashboard_view = WeighingDashboardView.as_view()
weighing_backup_view = WeighingBackupView.as_view()
