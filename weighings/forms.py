from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from weighings.services.formatting import parse_number
from weighings.services.storage import MAX_ANIMAL_ID_LENGTH, MAX_WEIGHT_KG, WEIGHT_QUANTIZE


class WeighingForm(forms.Form):
    input_classes = (
        "block w-full rounded-xl border border-slate-200 bg-white px-3 py-2 text-sm "
        "text-slate-700 shadow-inner transition focus:border-emerald-400 "
        "focus:outline-none focus:ring-2 focus:ring-emerald-100"
    )

    recorded_at = forms.DateTimeField(
        label="Fecha",
        required=False,
        widget=forms.DateTimeInput(attrs={"type": "datetime-local"}, format="%Y-%m-%dT%H:%M"),
    )
    animal_id = forms.CharField(
        label="ID del cerdo",
        max_length=MAX_ANIMAL_ID_LENGTH,
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "Ej: Lote-12 / 045"}),
    )
    weight_kg = forms.CharField(
        label="Peso (kg)",
        required=False,
        widget=forms.TextInput(attrs={"inputmode": "decimal", "placeholder": "Ej: 23.5"}),
    )

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if not self.is_bound:
            self.initial.setdefault("recorded_at", timezone.localtime().replace(second=0, microsecond=0))
        for field in self.fields.values():
            existing_classes = field.widget.attrs.get("class", "")
            field.widget.attrs["class"] = f"{existing_classes} {self.input_classes}".strip()

    def clean_recorded_at(self):
        value = self.cleaned_data.get("recorded_at")
        return value or timezone.now()

    def clean_animal_id(self) -> str:
        animal_id = (self.cleaned_data.get("animal_id") or "").strip()
        if not animal_id:
            raise ValidationError("Ingresa el ID del cerdo")
        return animal_id

    def clean_weight_kg(self) -> Decimal:
        weight = parse_number(self.cleaned_data.get("weight_kg"))
        if weight <= 0 or weight >= MAX_WEIGHT_KG:
            raise ValidationError("Ingresa un peso válido (> 0)")
        weight = weight.quantize(WEIGHT_QUANTIZE, rounding=ROUND_HALF_UP)
        if weight <= 0:
            raise ValidationError("Ingresa un peso válido (> 0)")
        return weight


class BackupImportForm(forms.Form):
    backup = forms.FileField(
        label="Archivo de respaldo (.json)",
        help_text="Reemplaza todos los pesajes registrados por los del archivo.",
        widget=forms.FileInput(attrs={"accept": ".json,application/json"}),
    )

    def clean_backup(self):
        uploaded = self.cleaned_data["backup"]
        filename = uploaded.name.lower()
        if not filename.endswith(".json"):
            raise ValidationError("El archivo debe tener extensión .json.")
        return uploaded
