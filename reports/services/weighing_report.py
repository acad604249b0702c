from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.utils import timezone

from weighings.services.deltas import AnnotatedWeighing, build_history
from weighings.services.formatting import (
    format_delta,
    format_local_date,
    format_weight,
    sanitize_filename,
)
from weighings.services.repository import WeighingRepository

SCOPE_ALL = "all"
SCOPE_FILTERED = "filtered"
REPORT_SCOPES = (SCOPE_ALL, SCOPE_FILTERED)

REPORT_HEADERS = ("Fecha", "ID Cerdo", "Peso (kg)", "Δ vs. anterior (kg)")


class EmptyReportError(Exception):
    """Raised when there are no weighings to export."""


@dataclass(frozen=True)
class WeighingReportRow:
    date_label: str
    animal_id: str
    weight_label: str
    delta_label: str

    def as_list(self) -> list[str]:
        return [self.date_label, self.animal_id, self.weight_label, self.delta_label]


@dataclass(frozen=True)
class WeighingReport:
    title: str
    brand_name: str
    generated_at: datetime
    filename_stem: str
    rows: tuple[WeighingReportRow, ...]

    @property
    def footer(self) -> str:
        return f"{self.brand_name} • Sistema de Pesajes"


def _build_row(entry: AnnotatedWeighing) -> WeighingReportRow:
    return WeighingReportRow(
        date_label=format_local_date(entry.recorded_at),
        animal_id=entry.animal_id,
        weight_label=format_weight(entry.weight_kg),
        delta_label=format_delta(entry.delta_kg),
    )


def build_weighing_report(
    repository: WeighingRepository,
    *,
    scope: str = SCOPE_ALL,
    animal_id: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> WeighingReport:
    """Collect the rows and labels of a weighing report.

    ``scope="all"`` always exports the whole history ordered by animal and
    date; ``scope="filtered"`` exports the history of ``animal_id`` when one
    is given.
    """
    brand_name = getattr(settings, "ANNCOR_BRAND_NAME", "ANNCOR")
    selected = (animal_id or "").strip() if scope == SCOPE_FILTERED else ""
    entries = build_history(repository.list_records(), selected or None)
    if not entries:
        raise EmptyReportError("No hay registros para exportar.")

    if selected:
        title = f"Pesajes – Cerdo {selected}"
        filename_stem = f"Pesajes_{sanitize_filename(selected)}"
    else:
        title = f"Pesajes – {brand_name}"
        filename_stem = f"Pesajes_{sanitize_filename(brand_name)}"

    return WeighingReport(
        title=title,
        brand_name=brand_name,
        generated_at=generated_at or timezone.now(),
        filename_stem=filename_stem,
        rows=tuple(_build_row(entry) for entry in entries),
    )
