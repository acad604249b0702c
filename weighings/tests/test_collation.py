from django.test import SimpleTestCase

from weighings.services.collation import collation_key, compare


class SpanishCollationTests(SimpleTestCase):
    def _sorted(self, values):
        return sorted(values, key=collation_key)

    def test_case_is_only_a_tiebreaker(self) -> None:
        self.assertEqual(self._sorted(["b", "A", "B", "a"]), ["a", "A", "b", "B"])

    def test_enye_sorts_between_n_and_o(self) -> None:
        self.assertEqual(
            self._sorted(["Zeta", "Oso", "Ñato", "Nube"]),
            ["Nube", "Ñato", "Oso", "Zeta"],
        )

    def test_accents_are_ignored_at_first_level(self) -> None:
        self.assertEqual(
            self._sorted(["Ema", "Élida", "Elena"]),
            ["Elena", "Élida", "Ema"],
        )

    def test_unaccented_letter_comes_before_accented_one(self) -> None:
        self.assertEqual(self._sorted(["pé", "pe"]), ["pe", "pé"])

    def test_digits_sort_before_letters_without_numeric_ordering(self) -> None:
        self.assertEqual(self._sorted(["A1", "2", "10"]), ["10", "2", "A1"])

    def test_prefix_sorts_first(self) -> None:
        self.assertEqual(self._sorted(["Lote-12", "Lote"]), ["Lote", "Lote-12"])

    def test_compare_returns_three_way_result(self) -> None:
        self.assertEqual(compare("árbol", "b"), -1)
        self.assertEqual(compare("b", "árbol"), 1)
        self.assertEqual(compare("045", "045"), 0)

    def test_acute_accent_sorts_before_grave(self) -> None:
        self.assertEqual(self._sorted(["à", "á", "a"]), ["a", "á", "à"])
        self.assertEqual(self._sorted(["pè", "pé", "pë"]), ["pé", "pè", "pë"])
        self.assertEqual(compare("á", "à"), -1)
