"""
Article Generation Service
OpenAI chat completion returning the review article, SEO metadata,
reviews, optional discovery schema and image prompts as one JSON object
"""
import os
import json
import logging
import re
from typing import Any, Dict, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from ..config import OPENAI_MODEL, OPENAI_TEMPERATURE, SYSTEM_PROMPT
from ..errors import ConfigurationError, UpstreamParseError
from ..models import GenerateRequest, GenerationResult, ProductData

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'https?://[^\s<>"\')\]]+')


def create_client() -> AsyncOpenAI:
    """
    Build an OpenAI client for a single, unbounded attempt
    Raises:
        ConfigurationError: If OPENAI_API_KEY is not set
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY environment variable is not configured.")
    return AsyncOpenAI(api_key=api_key, max_retries=0, timeout=None)


def build_payload(product: ProductData, request: GenerateRequest) -> Dict[str, Any]:
    return {
        "locale": request.targetLocale,
        "targetKeywords": request.targetKeywords,
        "outlineStyle": request.outlineStyle,
        "tone": request.tone,
        "geoPersona": request.geoPersona,
        "callToAction": request.callToAction,
        "includeDiscoverySchema": request.includeDiscoverySchema,
        "product": product.to_payload(),
        "affiliateLinks": request.affiliateLinks.model_dump(),
    }


async def generate_article(
    product: ProductData,
    request: GenerateRequest,
    client: Optional[AsyncOpenAI] = None,
) -> GenerationResult:
    """
    Generate the review article for a product
    Args:
        product: Extracted product data (may hold only sourceUrl)
        request: Validated generation request
        client: Optional OpenAI client; built from the environment when omitted
    Returns:
        Validated GenerationResult
    Raises:
        ConfigurationError: If no OpenAI credential is available
        UpstreamParseError: If the reply is empty, not JSON, or malformed
    """
    if client is None:
        client = create_client()

    payload = build_payload(product, request)
    logger.info(f"Requesting article for {product.sourceUrl} ({request.targetLocale}, model {OPENAI_MODEL})")

    response = await client.chat.completions.create(
        model=OPENAI_MODEL,
        temperature=OPENAI_TEMPERATURE,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
        ],
    )

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise UpstreamParseError("The generation service did not return any content.")

    generation = parse_generation(content)
    check_affiliate_links(generation.article, request)
    logger.info(
        f"Generated article: {len(generation.article)} chars, "
        f"{len(generation.reviews)} reviews, {len(generation.imagePrompts)} image prompts"
    )
    return generation


def parse_generation(content: str) -> GenerationResult:
    """
    Parse and validate the JSON reply, handling markdown fences
    Raises:
        UpstreamParseError: If parsing or validation fails
    """
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse generation JSON: {e}\nContent: {content}")
        raise UpstreamParseError("Could not parse generation response.") from e

    try:
        return GenerationResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Generation response has unexpected shape: {e}")
        raise UpstreamParseError("Generation response is missing required fields.") from e


def check_affiliate_links(article: str, request: GenerateRequest) -> None:
    """Warn about links in the article that are not active affiliate links; the text is left as is"""
    allowed = set(request.affiliateLinks.active().values())
    allowed.add(request.productUrl)
    for url in URL_PATTERN.findall(article):
        url = url.rstrip('.,;:!?')
        if url not in allowed:
            logger.warning(f"Article references a link that is not an active affiliate link: {url}")
