"""
Pipeline services
"""
from .article_generator import generate_article
from .dictionary import SharedResource, shared_dictionary
from .discovery_schema import build_discovery_schema, resolve_discovery_schema
from .image_generator import generate_images
from .pipeline import PipelineContext, build_review_article
from .product_scraper import scrape_product
from .spellcheck import apply_spellcheck, tokenize

__all__ = [
    "generate_article",
    "SharedResource",
    "shared_dictionary",
    "build_discovery_schema",
    "resolve_discovery_schema",
    "generate_images",
    "PipelineContext",
    "build_review_article",
    "scrape_product",
    "apply_spellcheck",
    "tokenize",
]
