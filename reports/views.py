from __future__ import annotations

from typing import Any, Callable

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect
from django.views import generic

from weighings.views import WeighingRepositoryMixin, dashboard_url

from .services.weighing_export import PDF_CONTENT_TYPE, XLSX_CONTENT_TYPE, render_pdf, render_xlsx
from .services.weighing_report import (
    REPORT_SCOPES,
    SCOPE_ALL,
    EmptyReportError,
    WeighingReport,
    build_weighing_report,
)


class WeighingReportExportView(WeighingRepositoryMixin, generic.View):
    http_method_names = ["get"]
    content_type: str = PDF_CONTENT_TYPE
    extension: str = "pdf"
    renderer: Callable[[WeighingReport], bytes] = staticmethod(render_pdf)

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        scope = request.GET.get("scope") or SCOPE_ALL
        if scope not in REPORT_SCOPES:
            scope = SCOPE_ALL
        animal_id = (request.GET.get("animal") or "").strip()
        try:
            report = build_weighing_report(self.get_repository(), scope=scope, animal_id=animal_id)
        except EmptyReportError as exc:
            messages.error(request, str(exc))
            return redirect(dashboard_url(animal_id))
        response = HttpResponse(self.renderer(report), content_type=self.content_type)
        response["Content-Disposition"] = f'attachment; filename="{report.filename_stem}.{self.extension}"'
        return response


class WeighingReportPdfView(WeighingReportExportView):
    content_type = PDF_CONTENT_TYPE
    extension = "pdf"
    renderer = staticmethod(render_pdf)


class WeighingReportXlsxView(WeighingReportExportView):
    content_type = XLSX_CONTENT_TYPE
    extension = "xlsx"
    renderer = staticmethod(render_xlsx)


weighing_report_pdf_view = WeighingReportPdfView.as_view()
weighing_report_xlsx_view = WeighingReportXlsxView.as_view()
