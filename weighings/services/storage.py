"""Backup files in the flat layout used by the offline version of the app.

Each entry carries ``id``, ``dateISO`` (ISO-8601 instant), ``pigId`` and
``weightKg``. Entries written by older clients may hold the weight as a
string, so weights are coerced with :func:`parse_number` on load.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .deltas import WeighingRecord
from .formatting import parse_number

logger = logging.getLogger(__name__)

STORAGE_KEY = "anncor_weighings_v1"

MAX_ANIMAL_ID_LENGTH = 64
MAX_WEIGHT_KG = Decimal("1000000")
WEIGHT_QUANTIZE = Decimal("0.001")

_IDENTIFIER_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, STORAGE_KEY)


class BackupFormatError(ValueError):
    """Raised when a backup payload cannot be read as a list of weighings."""


@dataclass
class BackupLoadResult:
    records: list[WeighingRecord]
    skipped: list[str] = field(default_factory=list)


def format_iso_instant(value: datetime) -> str:
    """``2025-01-01T00:00:00.000Z`` in UTC, matching ``Date.toISOString()``."""
    if timezone.is_naive(value):
        value = timezone.make_aware(value, dt_timezone.utc)
    value = value.astimezone(dt_timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def _parse_instant(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = parse_datetime(text)
    except ValueError:
        return None
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def _normalize_identifier(raw: Any, seen: set[str]) -> str:
    text = str(raw).strip() if raw not in (None, "") else ""
    if text:
        try:
            identifier = str(uuid.UUID(text))
        except ValueError:
            identifier = str(uuid.uuid5(_IDENTIFIER_NAMESPACE, text))
    else:
        identifier = str(uuid.uuid4())
    if identifier in seen:
        identifier = str(uuid.uuid4())
    seen.add(identifier)
    return identifier


def dump_records(records: Iterable[WeighingRecord]) -> str:
    payload = []
    for record in records:
        weight = record.weight_kg.normalize()
        payload.append(
            {
                "id": record.identifier,
                "dateISO": format_iso_instant(record.recorded_at),
                "pigId": record.animal_id,
                "weightKg": int(weight) if weight == weight.to_integral_value() else float(weight),
            }
        )
    return json.dumps(payload, ensure_ascii=False, indent=2)


def load_records(payload: str | bytes) -> BackupLoadResult:
    """Read a backup payload, skipping entries without a usable date or animal id."""
    try:
        entries = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise BackupFormatError("El respaldo no es un archivo JSON válido.") from exc
    if not isinstance(entries, list):
        raise BackupFormatError("El respaldo debe contener una lista de pesajes.")

    records: list[WeighingRecord] = []
    skipped: list[str] = []
    seen: set[str] = set()
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            skipped.append(f"Entrada {position}: formato no reconocido.")
            continue
        animal_id = str(entry.get("pigId") or "").strip()
        if not animal_id:
            skipped.append(f"Entrada {position}: falta el ID del cerdo.")
            continue
        if len(animal_id) > MAX_ANIMAL_ID_LENGTH:
            skipped.append(f"Entrada {position}: el ID del cerdo supera {MAX_ANIMAL_ID_LENGTH} caracteres.")
            continue
        recorded_at = _parse_instant(entry.get("dateISO"))
        if recorded_at is None:
            skipped.append(f"Entrada {position}: fecha inválida.")
            continue
        weight_kg = parse_number(entry.get("weightKg"))
        if abs(weight_kg) >= MAX_WEIGHT_KG:
            skipped.append(f"Entrada {position}: peso fuera de rango.")
            continue
        records.append(
            WeighingRecord(
                identifier=_normalize_identifier(entry.get("id"), seen),
                recorded_at=recorded_at,
                animal_id=animal_id,
                weight_kg=weight_kg.quantize(WEIGHT_QUANTIZE, rounding=ROUND_HALF_UP),
            )
        )

    if skipped:
        logger.warning("Se omitieron %s entradas del respaldo: %s", len(skipped), "; ".join(skipped[:3]))
    return BackupLoadResult(records=records, skipped=skipped)
