import unittest

from locator.ingestion.geocoding_client import parse_place, parse_search_results
from locator.resolver.core import LocationValidation, NotFound, classify
from locator.resolver.formatter import (
    Candidate, best_match, display_label, format_candidates, needs_disambiguation, short_name,
)
from tests.fixtures import (
    PARIS_FR, PARIS_PAYLOAD, PARISH_LAKE, SPRINGFIELD_IL, SPRINGFIELD_PAYLOAD, TOKYO,
)


def _cand(name, admin1=None, country=None) -> Candidate:
    return Candidate(id=1, name=name, display_name=name, country=country, admin1=admin1,
                     latitude=0.0, longitude=0.0)


class TestDisplayLabel(unittest.TestCase):
    def test_full_label_with_population(self):
        place = parse_place(SPRINGFIELD_IL)
        self.assertEqual(display_label(place), "Springfield, Illinois, United States (116k)")

    def test_admin1_same_as_name_is_skipped(self):
        self.assertEqual(display_label(parse_place(TOKYO)), "Tokyo, Japan (8337k)")

    def test_small_population_not_shown(self):
        place = parse_place({**SPRINGFIELD_IL, "population": 100000})
        self.assertEqual(display_label(place), "Springfield, Illinois, United States")

    def test_population_rounds_half_up(self):
        place = parse_place({**SPRINGFIELD_IL, "population": 150500})
        self.assertTrue(display_label(place).endswith("(151k)"))

    def test_country_equal_to_admin1_is_skipped(self):
        place = parse_place({"id": 1, "name": "Monaco-Ville", "latitude": 43.7, "longitude": 7.4,
                             "admin1": "Monaco", "country": "Monaco"})
        self.assertEqual(display_label(place), "Monaco-Ville, Monaco")

    def test_format_keeps_order_and_falls_back_to_country_code(self):
        places = parse_search_results(SPRINGFIELD_PAYLOAD)
        cands = format_candidates(places)
        self.assertEqual([c.id for c in cands], [p.id for p in places])
        bare = format_candidates([parse_place({"id": 7, "name": "X-town", "latitude": 1, "longitude": 2,
                                               "country_code": "DE"})])[0]
        self.assertEqual(bare.country, "DE")
        self.assertIsNone(bare.admin1)


class TestShortName(unittest.TestCase):
    def test_prefers_admin1(self):
        self.assertEqual(short_name(_cand("Springfield", "Missouri", "United States")), "Springfield, Missouri")

    def test_falls_back_to_country_when_admin1_is_name(self):
        self.assertEqual(short_name(_cand("Tokyo", "Tokyo", "Japan")), "Tokyo, Japan")

    def test_bare_name(self):
        self.assertEqual(short_name(_cand("Singapore", None, "Singapore")), "Singapore")

    def test_stable_under_reapplication(self):
        first = short_name(_cand("Springfield", "Illinois", "United States"))
        self.assertEqual(short_name(_cand(first)), first)
        self.assertEqual(short_name(_cand("Springfield", "Illinois", "United States")), first)

    def test_property_matches_function(self):
        c = format_candidates([parse_place(SPRINGFIELD_IL)])[0]
        self.assertEqual(c.short_name, "Springfield, Illinois")


class TestBestMatch(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(best_match([]))

    def test_prefers_populated_place_with_largest_population(self):
        places = parse_search_results(SPRINGFIELD_PAYLOAD)
        self.assertEqual(best_match(places).admin1, "Missouri")

    def test_never_returns_feature_when_a_city_exists(self):
        places = parse_search_results(PARIS_PAYLOAD)
        self.assertEqual(places[0].feature_code, "LK")
        self.assertEqual(best_match(places).id, PARIS_FR["id"])

    def test_tie_keeps_first(self):
        a = parse_place({**SPRINGFIELD_IL, "id": 1, "population": None})
        b = parse_place({**SPRINGFIELD_IL, "id": 2, "population": None})
        self.assertEqual(best_match([a, b]).id, 1)

    def test_fallback_to_first(self):
        lake = parse_place(PARISH_LAKE)
        hill = parse_place({**PARISH_LAKE, "id": 9, "name": "Paris Hill", "feature_code": "HLL"})
        self.assertIs(best_match([lake, hill]), lake)


class TestNeedsDisambiguation(unittest.TestCase):
    def test_outcomes(self):
        places = parse_search_results(SPRINGFIELD_PAYLOAD)
        self.assertTrue(needs_disambiguation(classify("Spring", places)))
        self.assertFalse(needs_disambiguation(classify("springfield", places)))
        self.assertFalse(needs_disambiguation(NotFound(query="zz", message="none")))

    def test_validation_payloads(self):
        places = parse_search_results(PARIS_PAYLOAD)
        body = LocationValidation.from_outcome(classify("Pari", places)).to_dict()
        self.assertTrue(needs_disambiguation(body))
        self.assertFalse(needs_disambiguation({**body, "exact_match": True}))
        self.assertFalse(needs_disambiguation({**body, "success": False}))
        self.assertFalse(needs_disambiguation({"success": True, "results": [body["results"][0]], "exact_match": False}))


if __name__ == "__main__":
    unittest.main()
