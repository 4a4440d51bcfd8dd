"""
Tests for models.py — ScrapedFragment merging and the caller-facing dict shapes.
"""
from __future__ import annotations

from models import (
    CandidateProduct,
    FootprintResult,
    PackagingInfo,
    ProductReport,
    ScrapedFragment,
)


class TestScrapedFragmentMerge:
    def test_ingredient_order_is_first_seen(self):
        f = ScrapedFragment(ingredients=["Water", "Glycerin"])
        f.merge(ScrapedFragment(ingredients=["Glycerin", "Aloe", "Water", "Citric Acid"]))
        assert f.ingredients == ["Water", "Glycerin", "Aloe", "Citric Acid"]

    def test_dedupe_is_case_sensitive(self):
        f = ScrapedFragment(ingredients=["water"])
        f.merge(ScrapedFragment(ingredients=["Water", "water"]))
        assert f.ingredients == ["water", "Water"]

    def test_recyclable_is_or_and_never_reset(self):
        f = ScrapedFragment()
        f.merge(ScrapedFragment(recyclable=True))
        f.merge(ScrapedFragment(recyclable=False))
        assert f.recyclable is True

    def test_materials_and_info_deduplicated(self):
        f = ScrapedFragment(packaging_materials=["plastic"], additional_info=["Made in India"])
        f.merge(ScrapedFragment(packaging_materials=["plastic", "glass"], additional_info=["Made in India", "Vegan"]))
        assert f.packaging_materials == ["plastic", "glass"]
        assert f.additional_info == ["Made in India", "Vegan"]

    def test_has_ingredients(self):
        assert not ScrapedFragment().has_ingredients
        assert ScrapedFragment(ingredients=["Water"]).has_ingredients


class TestDictShapes:
    def _footprint(self, **kwargs) -> FootprintResult:
        defaults = dict(
            score=70,
            details={"manufacturing": 60, "transportation": 80, "packaging": 65, "lifecycle": 75},
        )
        defaults.update(kwargs)
        return FootprintResult(**defaults)

    def test_footprint_minimal(self):
        assert self._footprint().to_dict() == {
            "score": 70,
            "details": {"manufacturing": 60, "transportation": 80, "packaging": 65, "lifecycle": 75},
        }

    def test_footprint_optional_fields(self):
        data = self._footprint(
            overall_explanation="Fine.",
            explanations={"packaging": "Plastic tube"},
            recommendations=("Buy refills",),
        ).to_dict()
        assert data["overallExplanation"] == "Fine."
        assert data["explanations"] == {"packaging": "Plastic tube"}
        assert data["recommendations"] == ["Buy refills"]

    def test_report_shape(self):
        candidate = CandidateProduct(
            name="Alt Soap", brand=None, price=190.0, image_url=None,
            canonical_link="https://shop.example/p/1", source_host="shop.example",
            ingredients=["Olive Oil"], eco_score=80,
        )
        report = ProductReport(
            name="EcoSoap Bar",
            brand="EcoSoap",
            price=200.0,
            ingredients=["Coconut Oil"],
            packaging=PackagingInfo(materials=["paper"], recyclable=True),
            carbon_footprint=self._footprint(),
            similar_products=[candidate],
        )
        data = report.to_dict()
        assert set(data) == {"name", "brand", "price", "ingredients", "packaging", "carbonFootprint", "similarProducts"}
        assert data["packaging"] == {"materials": ["paper"], "recyclable": True}
        assert data["similarProducts"][0]["ecoScore"] == 80
        assert data["similarProducts"][0]["link"] == "https://shop.example/p/1"
