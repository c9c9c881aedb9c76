"""
Review article pipeline
Scrape -> generate -> spell-check / discovery schema / images -> response
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from openai import AsyncOpenAI

from ..models import GenerateRequest, GenerateResponse
from .article_generator import generate_article
from .dictionary import SharedResource, SpellDictionary, shared_dictionary
from .discovery_schema import resolve_discovery_schema
from .image_generator import generate_images
from .product_scraper import scrape_product
from .spellcheck import apply_spellcheck

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Collaborators shared by the pipeline stages"""
    dictionary: SharedResource[SpellDictionary]
    openai_client: Optional[AsyncOpenAI] = None
    transport: Optional[httpx.AsyncBaseTransport] = None


def get_pipeline_context() -> PipelineContext:
    """FastAPI dependency; tests override it"""
    return PipelineContext(dictionary=shared_dictionary)


async def build_review_article(request: GenerateRequest, context: PipelineContext) -> GenerateResponse:
    """
    Run the full pipeline for one request
    Raises:
        ConfigurationError, UpstreamParseError: from article generation
    """
    product_url = request.productUrl

    product, dictionary = await asyncio.gather(
        scrape_product(product_url, transport=context.transport),
        context.dictionary.get(),
    )

    generation = await generate_article(product, request, client=context.openai_client)

    discovery_schema = resolve_discovery_schema(request, generation, product)

    # Spell-check is CPU bound; keep it off the event loop while images are fetched
    spellcheck, image_batch = await asyncio.gather(
        asyncio.to_thread(apply_spellcheck, dictionary, generation.article),
        generate_images(
            generation.imagePrompts,
            product,
            request.imageStyle,
            transport=context.transport,
        ),
    )
    if spellcheck.corrections:
        logger.info(f"Spell-check made {len(spellcheck.corrections)} corrections")
    logger.info(f"Images: {len(image_batch.images)} ({image_batch.outcome.value})")

    return GenerateResponse(
        article=spellcheck.corrected,
        seo=generation.seo,
        product=product.to_payload(),
        reviews=generation.reviews,
        affiliateLinks=request.affiliateLinks,
        discoverySchema=discovery_schema,
        images=image_batch.images,
        spellcheck=spellcheck,
    )
