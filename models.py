"""
Shared data types for the enrichment pipeline.

Everything here is created fresh for one analysis request and thrown away
once the report is returned — nothing is cached across requests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

UNAVAILABLE_INGREDIENTS = "Ingredients information unavailable"

FOOTPRINT_DETAIL_KEYS = ("manufacturing", "transportation", "packaging", "lifecycle")


def _append_unique(target: list[str], values) -> None:
    """Append each value not already present, keeping first-seen order (case-sensitive)."""
    for value in values:
        if value not in target:
            target.append(value)


# ── Scraped evidence ──────────────────────────────────────────────────────────

@dataclass
class ScrapedFragment:
    """Partial, possibly empty evidence about ingredients / packaging."""
    ingredients: list[str] = field(default_factory=list)           # ordered set
    packaging_materials: list[str] = field(default_factory=list)   # set, first-seen order
    recyclable: bool = False                                       # only ever switched on
    additional_info: list[str] = field(default_factory=list)       # ordered set

    @property
    def has_ingredients(self) -> bool:
        return bool(self.ingredients)

    def merge(self, other: "ScrapedFragment") -> None:
        """Fold *other* into this fragment: append-if-absent for lists, OR for recyclable."""
        _append_unique(self.ingredients, other.ingredients)
        _append_unique(self.packaging_materials, other.packaging_materials)
        _append_unique(self.additional_info, other.additional_info)
        self.recyclable = self.recyclable or other.recyclable


# ── Judgment results ──────────────────────────────────────────────────────────

@dataclass
class ProductIdentity:
    """Best-guess identity of the product in the photo."""
    name: str
    brand: Optional[str] = None


@dataclass
class AttributeGuess:
    """Vision fallback when no catalog source knows the ingredients."""
    ingredients: list[str]
    packaging_materials: list[str]
    recyclable: bool = False
    packaging_description: str = ""


@dataclass
class CategoryProfile:
    main_category: str
    sub_category: str
    product_type: str
    target_use: list[str] = field(default_factory=list)
    search_terms: list[str] = field(default_factory=list)
    exclude_terms: list[str] = field(default_factory=list)
    key_characteristics: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FootprintResult:
    """0–100 composite eco rating with four named sub-scores."""
    score: int
    details: dict[str, int]
    overall_explanation: Optional[str] = None
    explanations: dict[str, str] = field(default_factory=dict)
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data: dict = {"score": self.score, "details": dict(self.details)}
        if self.overall_explanation:
            data["overallExplanation"] = self.overall_explanation
        if self.explanations:
            data["explanations"] = dict(self.explanations)
        if self.recommendations:
            data["recommendations"] = list(self.recommendations)
        return data


# ── Product records ───────────────────────────────────────────────────────────

@dataclass
class PackagingInfo:
    materials: list[str] = field(default_factory=list)
    recyclable: bool = False
    description: str = ""

    def to_dict(self) -> dict:
        data: dict = {"materials": list(self.materials), "recyclable": self.recyclable}
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class CandidateProduct:
    """An alternative product scraped from a catalog source. Identity = canonical_link."""
    name: str
    brand: Optional[str]
    price: Optional[float]
    image_url: Optional[str]
    canonical_link: str         # absolute URL
    source_host: str
    description: str = ""

    # Attached after enrichment
    ingredients: list[str] = field(default_factory=list)
    packaging: PackagingInfo = field(default_factory=PackagingInfo)
    eco_score: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "imageUrl": self.image_url,
            "link": self.canonical_link,
            "source": self.source_host,
            "description": self.description,
            "ingredients": list(self.ingredients),
            "packaging": self.packaging.to_dict(),
            "ecoScore": self.eco_score,
        }


@dataclass
class ProductReport:
    """What the pipeline hands back to its caller."""
    name: str
    brand: Optional[str]
    price: float
    ingredients: list[str]
    packaging: PackagingInfo
    carbon_footprint: FootprintResult
    similar_products: list[CandidateProduct] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "brand": self.brand,
            "price": self.price,
            "ingredients": list(self.ingredients),
            "packaging": self.packaging.to_dict(),
            "carbonFootprint": self.carbon_footprint.to_dict(),
            "similarProducts": [p.to_dict() for p in self.similar_products],
        }
