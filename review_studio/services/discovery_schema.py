"""
Discovery Schema Builder
schema.org Product / Review markup for search engines
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Dict, Any, Optional

from ..config import SCHEMA_PRICE_CURRENCY, SCHEMA_AVAILABILITY
from ..models import (
    AffiliateLinks,
    GenerateRequest,
    GenerationResult,
    ProductData,
    Review,
    SeoMetadata,
)

logger = logging.getLogger(__name__)


def resolve_discovery_schema(
    request: GenerateRequest,
    generation: GenerationResult,
    product: ProductData,
) -> Optional[Dict[str, Any]]:
    """
    Pick the structured data for the response
    Returns:
        None when not requested, the generated schema when the model supplied
        one, otherwise a schema built from the product and reviews
    """
    if not request.includeDiscoverySchema:
        return None
    if generation.discoverySchema:
        logger.info("Using discovery schema supplied by the generator")
        return generation.discoverySchema
    logger.info("Building discovery schema from product data")
    return build_discovery_schema(product, generation.seo, generation.reviews, request.affiliateLinks)


def build_discovery_schema(
    product: ProductData,
    seo: SeoMetadata,
    reviews: List[Review],
    affiliate_links: AffiliateLinks,
) -> Dict[str, Any]:
    review_list = [build_review(review) for review in reviews]

    schema: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": product.title or seo.title,
        "description": product.description or seo.metaDescription,
    }
    if product.images:
        schema["image"] = product.images

    aggregate = aggregate_rating(reviews)
    if aggregate:
        schema["aggregateRating"] = aggregate

    schema["review"] = review_list

    if product.price:
        schema["offers"] = {
            "@type": "AggregateOffer",
            "priceCurrency": SCHEMA_PRICE_CURRENCY,
            "lowPrice": product.price,
            "highPrice": product.price,
            "availability": SCHEMA_AVAILABILITY,
            "url": product.sourceUrl,
        }

    schema["isRelatedTo"] = affiliate_links.active()
    return schema


def build_review(review: Review) -> Dict[str, Any]:
    return {
        "@type": "Review",
        "author": {"@type": "Person", "name": review.reviewer},
        "reviewRating": {
            "@type": "Rating",
            "ratingValue": review.rating,
            "bestRating": 5,
            "worstRating": 1,
        },
        "reviewBody": review.details,
        "name": review.summary,
    }


def aggregate_rating(reviews: List[Review]) -> Optional[Dict[str, Any]]:
    """Mean rating rounded half up to one decimal place, or None without reviews"""
    if not reviews:
        return None
    mean = sum(Decimal(str(review.rating)) for review in reviews) / len(reviews)
    return {
        "@type": "AggregateRating",
        "ratingValue": str(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)),
        "reviewCount": len(reviews),
    }
