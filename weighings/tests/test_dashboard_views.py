from __future__ import annotations

import json
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.messages import get_messages
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import RequestFactory, TestCase
from django.urls import reverse

from weighings.models import Weighing
from weighings.services.deltas import WeighingRecord
from weighings.services.repository import InMemoryWeighingRepository
from weighings.views import WeighingDashboardView


def at(day: int) -> datetime:
    return datetime(2025, 1, day, 12, tzinfo=dt_timezone.utc)


class WeighingDashboardViewTests(TestCase):
    def setUp(self) -> None:
        self.url = reverse("weighings:dashboard")

    def _create_sample(self) -> None:
        for animal_id, day, weight in (
            ("A", 1, "10"),
            ("A", 2, "11.2"),
            ("B", 1, "9.7"),
            ("A", 3, "12.0"),
            ("B", 2, "10.0"),
        ):
            Weighing.objects.create(animal_id=animal_id, recorded_at=at(day), weight_kg=Decimal(weight))

    def _messages(self, response) -> list[str]:
        return [str(message) for message in get_messages(response.wsgi_request)]

    def test_root_redirects_to_dashboard(self) -> None:
        response = self.client.get("/")
        self.assertRedirects(response, self.url)

    def test_empty_dashboard(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "weighings/dashboard.html")
        self.assertEqual(response.context["summary"], [])
        self.assertEqual(response.context["history"], [])
        self.assertContains(response, "Sin datos aún.")
        self.assertContains(response, "No hay registros para mostrar.")

    def test_summary_and_history(self) -> None:
        self._create_sample()
        response = self.client.get(self.url)
        summary = response.context["summary"]
        self.assertEqual([entry.animal_id for entry in summary], ["A", "B"])
        self.assertEqual([entry.delta_kg for entry in summary], [Decimal("0.8"), Decimal("0.3")])
        history = response.context["history"]
        self.assertEqual([entry.animal_id for entry in history], ["A", "A", "A", "B", "B"])
        self.assertEqual(response.context["animal_ids"], ["A", "B"])
        self.assertEqual(response.context["history_ordering_label"], "por ID y fecha")
        self.assertContains(response, "+1.2")
        self.assertContains(response, "text-emerald-700")
        self.assertContains(response, "–")

    def test_filtered_history_keeps_deltas(self) -> None:
        self._create_sample()
        response = self.client.get(self.url, {"animal": "B"})
        history = response.context["history"]
        self.assertEqual([entry.delta_kg for entry in history], [None, Decimal("0.3")])
        self.assertEqual(response.context["animal_filter"], "B")
        self.assertEqual(response.context["history_ordering_label"], "por fecha")
        self.assertEqual(len(response.context["summary"]), 2)

    def test_create_weighing(self) -> None:
        response = self.client.post(
            self.url,
            {"intent": "create", "recorded_at": "2025-01-02T08:30", "animal_id": " 045 ", "weight_kg": "23,5"},
        )
        self.assertRedirects(response, self.url)
        weighing = Weighing.objects.get()
        self.assertEqual(weighing.animal_id, "045")
        self.assertEqual(weighing.weight_kg, Decimal("23.5"))
        self.assertIn("Pesaje registrado para el cerdo 045.", self._messages(response))

    def test_create_keeps_active_filter(self) -> None:
        response = self.client.post(
            self.url,
            {"intent": "create", "animal_id": "B", "weight_kg": "10", "animal": "B"},
        )
        self.assertRedirects(response, f"{self.url}?animal=B")

    def test_invalid_weighing_is_not_saved(self) -> None:
        response = self.client.post(self.url, {"intent": "create", "animal_id": "", "weight_kg": "0"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Weighing.objects.exists())
        form = response.context["form"]
        self.assertEqual(form.errors["animal_id"], ["Ingresa el ID del cerdo"])
        self.assertEqual(form.errors["weight_kg"], ["Ingresa un peso válido (> 0)"])

    def test_delete_weighing(self) -> None:
        self._create_sample()
        weighing = Weighing.objects.filter(animal_id="B").first()
        response = self.client.post(
            self.url,
            {"intent": "delete", "weighing_id": str(weighing.identifier), "animal": "B"},
        )
        self.assertRedirects(response, f"{self.url}?animal=B")
        self.assertFalse(Weighing.objects.filter(pk=weighing.pk).exists())
        self.assertEqual(Weighing.objects.count(), 4)

    def test_delete_unknown_weighing(self) -> None:
        self._create_sample()
        response = self.client.post(self.url, {"intent": "delete", "weighing_id": "desconocido"})
        self.assertRedirects(response, self.url)
        self.assertEqual(Weighing.objects.count(), 5)
        self.assertIn("No se encontró el registro que intentas eliminar.", self._messages(response))

    def test_clear_all(self) -> None:
        self._create_sample()
        response = self.client.post(self.url, {"intent": "clear"})
        self.assertRedirects(response, self.url)
        self.assertFalse(Weighing.objects.exists())
        self.assertIn("Se eliminaron 5 registros.", self._messages(response))

    def test_unknown_intent_redirects(self) -> None:
        response = self.client.post(self.url, {"intent": "otro"})
        self.assertRedirects(response, self.url)

    def test_restore_backup(self) -> None:
        self._create_sample()
        payload = [
            {"id": "1", "dateISO": "2025-02-01T00:00:00.000Z", "pigId": "C", "weightKg": "30,5"},
            {"id": "2", "dateISO": "sin fecha", "pigId": "C", "weightKg": 31},
        ]
        upload = SimpleUploadedFile(
            "respaldo.json",
            json.dumps(payload).encode("utf-8"),
            content_type="application/json",
        )
        response = self.client.post(self.url, {"intent": "import", "backup": upload})
        self.assertRedirects(response, self.url)
        weighing = Weighing.objects.get()
        self.assertEqual(weighing.animal_id, "C")
        self.assertEqual(weighing.weight_kg, Decimal("30.5"))
        messages = self._messages(response)
        self.assertIn("Respaldo restaurado: 1 pesajes.", messages)
        self.assertTrue(any("1 entrada(s) se omitieron" in message for message in messages))

    def test_restore_rejects_invalid_backup(self) -> None:
        self._create_sample()
        upload = SimpleUploadedFile("respaldo.json", b"{roto", content_type="application/json")
        response = self.client.post(self.url, {"intent": "import", "backup": upload})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.context["import_form"].errors["backup"],
            ["El respaldo no es un archivo JSON válido."],
        )
        self.assertEqual(Weighing.objects.count(), 5)

    def test_repository_can_be_injected(self) -> None:
        repository = InMemoryWeighingRepository(
            [
                WeighingRecord("1", at(1), "Ñato", Decimal("10")),
                WeighingRecord("2", at(2), "Ñato", Decimal("10")),
                WeighingRecord("3", at(1), "Nube", Decimal("8")),
            ]
        )
        view = WeighingDashboardView.as_view(repository=repository)
        response = view(RequestFactory().get(self.url))
        summary = response.context_data["summary"]
        self.assertEqual([entry.animal_id for entry in summary], ["Nube", "Ñato"])
        self.assertEqual(summary[1].delta_kg, Decimal("0"))
        self.assertFalse(Weighing.objects.exists())


class WeighingBackupViewTests(TestCase):
    def test_downloads_backup(self) -> None:
        weighing = Weighing.objects.create(animal_id="A", recorded_at=at(1), weight_kg=Decimal("10.5"))
        response = self.client.get(reverse("weighings:backup"))
        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment;", response["Content-Disposition"])
        self.assertIn(".json", response["Content-Disposition"])
        payload = json.loads(response.content)
        self.assertEqual(
            payload,
            [
                {
                    "id": str(weighing.identifier),
                    "dateISO": "2025-01-01T12:00:00.000Z",
                    "pigId": "A",
                    "weightKg": 10.5,
                }
            ],
        )
