from enum import Enum
from typing import Annotated, List, Optional, Dict, Any, Union

from pydantic import BaseModel, Field, HttpUrl, StrictBool, TypeAdapter, ValidationError, field_validator

from .config import DEFAULT_IMAGE_STYLE

HTTP_URL = TypeAdapter(HttpUrl)

# Integers stay integers so ratings echo back as the model sent them
Rating = Union[Annotated[int, Field(ge=1, le=5)], Annotated[float, Field(ge=1, le=5)]]


# ============ Request Models ============
class AffiliateLinks(BaseModel):
    amazon: str = ""
    mercadoLivre: str = ""
    shopee: str = ""
    magalu: str = ""
    clickbank: str = ""
    hotmart: str = ""
    eduzz: str = ""
    kiwify: str = ""
    braip: str = ""

    def active(self) -> Dict[str, str]:
        """Only the platforms that carry a link, in declaration order"""
        return {platform: link for platform, link in self.model_dump().items() if link}


class GenerateRequest(BaseModel):
    productUrl: str
    targetLocale: str = Field(min_length=2)
    targetKeywords: str = ""
    outlineStyle: str = Field(min_length=3)
    tone: str = Field(min_length=3)
    callToAction: str = Field(min_length=3)
    geoPersona: str = Field(min_length=3)
    includeDiscoverySchema: StrictBool
    affiliateLinks: AffiliateLinks
    imageStyle: str = DEFAULT_IMAGE_STYLE

    @field_validator("productUrl")
    @classmethod
    def http_url(cls, value: str) -> str:
        """Must parse as an http(s) URL; the caller's spelling is kept as sent"""
        try:
            HTTP_URL.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"productUrl must be a valid http(s) URL: {e.errors()[0]['msg']}")
        return value


# ============ Product Models ============
class ProductData(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    highlights: Optional[List[str]] = None
    specifications: Optional[Dict[str, str]] = None
    price: Optional[str] = None
    brand: Optional[str] = None
    images: Optional[List[str]] = None
    sourceUrl: str

    def to_payload(self) -> Dict[str, Any]:
        """Serialize without the fields extraction could not find"""
        return self.model_dump(exclude_none=True)


# ============ Generation Models ============
class SeoMetadata(BaseModel):
    title: str
    metaDescription: str
    keywords: List[str] = Field(default_factory=list)
    ogTitle: str = ""
    ogDescription: str = ""
    canonicalUrl: Optional[str] = None


class Review(BaseModel):
    reviewer: str
    rating: Rating
    summary: str = ""
    details: str = ""


class GenerationResult(BaseModel):
    article: str
    seo: SeoMetadata
    reviews: List[Review] = Field(default_factory=list)
    discoverySchema: Optional[Dict[str, Any]] = None
    imagePrompts: List[str] = Field(default_factory=list)

    @field_validator("reviews", "imagePrompts", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return [] if value is None else value


# ============ Post-processing Models ============
class SpellCorrection(BaseModel):
    original: str
    suggestion: str


class SpellCheckResult(BaseModel):
    corrected: str
    corrections: List[SpellCorrection] = Field(default_factory=list)


class GeneratedImage(BaseModel):
    url: str
    prompt: str


class ImageOutcome(str, Enum):
    CREDENTIAL_ABSENT = "credential_absent"
    SERVICE_FAILED = "service_failed"
    SERVICE_SUCCEEDED = "service_succeeded"


class ImageBatch(BaseModel):
    outcome: ImageOutcome
    images: List[GeneratedImage]


# ============ Response Models ============
class HealthResponse(BaseModel):
    status: str
    version: Optional[str] = None
    openai_configured: Optional[bool] = None
    image_service_configured: Optional[bool] = None
    dictionary_loaded: Optional[bool] = None


class GenerateResponse(BaseModel):
    article: str
    seo: SeoMetadata
    product: Dict[str, Any]
    reviews: List[Review]
    affiliateLinks: AffiliateLinks
    discoverySchema: Optional[Dict[str, Any]] = None
    images: List[GeneratedImage]
    spellcheck: SpellCheckResult
