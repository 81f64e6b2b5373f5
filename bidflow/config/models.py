"""Catalog schema models using Pydantic.

A catalog bundles everything the matcher needs to score an announcement:
the products with their keyword dictionaries and supported pipe sizes, the
organization tiers, the scoring weights and the confidence thresholds. All
models are frozen so a loaded catalog can be shared freely between threads.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def normalize_terms(terms: Iterable[str]) -> Tuple[str, ...]:
    """Strip, lowercase and de-duplicate terms, dropping empty ones.

    Order of first appearance is preserved because reasons are reported in
    catalog order.
    """
    normalized = []
    for term in terms:
        stripped = term.strip().lower()
        if stripped and stripped not in normalized:
            normalized.append(stripped)
    return tuple(normalized)


class PipeSizeRange(BaseModel):
    """Nominal pipe diameters (in millimeters) a product supports."""

    min_mm: int = Field(..., gt=0, description="Smallest supported diameter")
    max_mm: int = Field(..., gt=0, description="Largest supported diameter")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.min_mm > self.max_mm:
            raise ValueError(
                f"min_mm ({self.min_mm}) cannot be greater than max_mm ({self.max_mm})"
            )
        return self

    def contains(self, size_mm: int) -> bool:
        return self.min_mm <= size_mm <= self.max_mm

    def label(self) -> str:
        return f"DN{self.min_mm}-DN{self.max_mm}"


class Product(BaseModel):
    """A catalog product and the keyword dictionary used to recognize it."""

    id: str = Field(..., min_length=1, description="Unique product identifier")
    name: str = Field(..., min_length=1, description="Display name")
    category: str = Field(..., min_length=1, description="Product category")
    pipe_size: PipeSizeRange = Field(..., description="Supported pipe diameter range")
    strong_keywords: Tuple[str, ...] = Field(
        ..., min_length=1, description="Each match adds the strong keyword weight"
    )
    weak_keywords: Tuple[str, ...] = Field(
        default=(), description="Each match adds the weak keyword weight"
    )
    exclude_keywords: Tuple[str, ...] = Field(
        default=(), description="Any match forces the product score to zero"
    )
    target_organizations: Tuple[str, ...] = Field(
        default=(),
        description="Organization name fragments treated as high affinity for this product",
    )

    model_config = {"frozen": True}

    @field_validator("id", "name", "category")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("weak_keywords", "exclude_keywords", "target_organizations")
    @classmethod
    def normalize_optional_terms(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return normalize_terms(v)

    @field_validator("strong_keywords")
    @classmethod
    def normalize_strong_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        normalized = normalize_terms(v)
        if not normalized:
            raise ValueError("Product must have at least one strong keyword")
        return normalized


class OrganizationTiers(BaseModel):
    """Organization name fragments grouped by buyer affinity."""

    high_affinity: Tuple[str, ...] = Field(
        default=(
            "k-water",
            "수자원공사",
            "상수도사업본부",
            "환경공단",
            "농어촌공사",
            "지역난방공사",
            "한국전력",
        ),
        description="Known buyers of the catalog's products",
    )
    public_sector: Tuple[str, ...] = Field(
        default=("시청", "군청", "구청", "도청", "공단", "공사", "사업소"),
        description="Generic public-sector organization fragments",
    )
    high_score: int = Field(50, ge=0, description="Score for a high-affinity organization")
    public_score: int = Field(25, ge=0, description="Score for a public-sector organization")
    default_score: int = Field(10, ge=0, description="Score for any other organization")

    model_config = {"frozen": True}

    @field_validator("high_affinity", "public_sector")
    @classmethod
    def normalize_fragments(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return normalize_terms(v)

    @model_validator(mode="after")
    def validate_score_order(self):
        if not self.high_score >= self.public_score >= self.default_score:
            raise ValueError(
                "Organization scores must satisfy high_score >= public_score >= default_score"
            )
        return self


class ScoringWeights(BaseModel):
    """Point values for each scoring signal."""

    strong_keyword: int = Field(10, ge=0, description="Points per strong keyword")
    weak_keyword: int = Field(3, ge=0, description="Points per weak keyword")
    keyword_cap: int = Field(100, gt=0, description="Maximum keyword sub-score")
    pipe_size_max: int = Field(25, ge=0, description="Points for a diameter within range")
    pipe_size_partial: int = Field(
        10, ge=0, description="Points for a diameter just outside the range"
    )
    pipe_size_tolerance: float = Field(
        0.2, ge=0.0, le=1.0, description="Relative band beyond each bound that scores partially"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_pipe_size_points(self):
        if self.pipe_size_partial > self.pipe_size_max:
            raise ValueError("pipe_size_partial cannot exceed pipe_size_max")
        return self


class MatchThresholds(BaseModel):
    """Score breakpoints for confidence tiers and for qualifying as a match."""

    high: int = Field(70, ge=0, description="Minimum score for high confidence")
    medium: int = Field(40, ge=0, description="Minimum score for medium confidence")
    low: int = Field(20, ge=0, description="Minimum score for low confidence")
    qualifying: int = Field(40, ge=0, description="Minimum score for is_match")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_order(self):
        if not self.low <= self.medium <= self.high:
            raise ValueError("Thresholds must satisfy low <= medium <= high")
        return self


class Catalog(BaseModel):
    """Root catalog object injected into the matcher."""

    version: str = Field("1", min_length=1, description="Catalog version label")
    products: Tuple[Product, ...] = Field(default=(), description="Products to score")
    organizations: OrganizationTiers = Field(default_factory=OrganizationTiers)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: MatchThresholds = Field(default_factory=MatchThresholds)

    model_config = {"frozen": True}

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v):
        # YAML reads `version: 2025.10` as the float 2025.1, so floats are refused
        if isinstance(v, float):
            raise ValueError(
                f"Catalog version {v!r} was read as a number; quote it (version: \"{v}\")"
            )
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @model_validator(mode="after")
    def validate_unique_products(self):
        seen = set()
        for product in self.products:
            if product.id in seen:
                raise ValueError(f"Duplicate product id: {product.id} appears multiple times")
            seen.add(product.id)
        return self

    @property
    def max_total_score(self) -> int:
        """Highest total a single product can reach."""
        return (
            self.scoring.keyword_cap
            + self.scoring.pipe_size_max
            + self.organizations.high_score
        )

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None
