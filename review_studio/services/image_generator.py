"""
Image Generator Service
Requests product imagery from the image generation API, falling back to
placeholder images when the service is not configured or fails
"""
import logging
import os
from typing import List, Optional, Tuple

import httpx

from ..config import (
    IMAGE_SERVICE_URL,
    IMAGE_SERVICE_TIMEOUT,
    IMAGE_ASPECT_RATIO,
    MAX_IMAGE_COUNT,
    PLACEHOLDER_URL_TEMPLATE,
    PLACEHOLDER_PALETTE_NO_CREDENTIAL,
    PLACEHOLDER_PALETTE_SERVICE_FAILED,
)
from ..errors import UpstreamFetchError
from ..models import GeneratedImage, ImageBatch, ImageOutcome, ProductData

logger = logging.getLogger(__name__)


def default_prompts(product: ProductData, style: str) -> List[str]:
    subject = product.title or "Product"
    return [
        f"{subject} hero shot, {style}",
        f"{subject} lifestyle photo, {style}",
    ]


def placeholder_url(index: int, palette: Tuple[str, str]) -> str:
    background, foreground = palette
    return PLACEHOLDER_URL_TEMPLATE.format(background=background, foreground=foreground, index=index + 1)


def placeholders(prompts: List[str], palette: Tuple[str, str]) -> List[GeneratedImage]:
    return [
        GeneratedImage(url=placeholder_url(index, palette), prompt=prompt)
        for index, prompt in enumerate(prompts)
    ]


async def generate_images(
    prompts: List[str],
    product: ProductData,
    style: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ImageBatch:
    """
    Obtain one image per prompt
    Args:
        prompts: Image prompts from the generator (may be empty)
        product: Extracted product data, used for default prompts and metadata
        style: Image style description
        transport: Optional httpx transport (tests inject a mock one)
    Returns:
        ImageBatch whose image list is as long as the prompt list used
    """
    prompts = list(prompts) or default_prompts(product, style)

    api_key = os.getenv("NANO_BANANA_API_KEY")
    if not api_key:
        logger.info(f"NANO_BANANA_API_KEY not set - returning {len(prompts)} placeholder images")
        return ImageBatch(
            outcome=ImageOutcome.CREDENTIAL_ABSENT,
            images=placeholders(prompts, PLACEHOLDER_PALETTE_NO_CREDENTIAL),
        )

    try:
        urls = await request_images(prompts, product, style, api_key, transport)
    except UpstreamFetchError as e:
        logger.warning(f"Image generation failed, using placeholders: {e}")
        return ImageBatch(
            outcome=ImageOutcome.SERVICE_FAILED,
            images=placeholders(prompts, PLACEHOLDER_PALETTE_SERVICE_FAILED),
        )

    images = []
    for index, prompt in enumerate(prompts):
        if index < len(urls):
            images.append(GeneratedImage(url=urls[index], prompt=prompt))
        else:
            images.append(GeneratedImage(
                url=placeholder_url(index, PLACEHOLDER_PALETTE_SERVICE_FAILED),
                prompt=prompt,
            ))
    logger.info(f"Image service returned {len(urls)} images for {len(prompts)} prompts")
    return ImageBatch(outcome=ImageOutcome.SERVICE_SUCCEEDED, images=images)


async def request_images(
    prompts: List[str],
    product: ProductData,
    style: str,
    api_key: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[str]:
    """Single call to the image API; any failure becomes UpstreamFetchError"""
    payload = {
        "prompts": prompts,
        "aspect_ratio": IMAGE_ASPECT_RATIO,
        "style": style,
        "count": min(len(prompts), MAX_IMAGE_COUNT),
        "metadata": {
            "product": product.title,
            "brand": product.brand,
            "source": product.sourceUrl,
        },
    }

    try:
        async with httpx.AsyncClient(timeout=IMAGE_SERVICE_TIMEOUT, transport=transport) as client:
            response = await client.post(
                IMAGE_SERVICE_URL,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Image API request failed: {e}") from e

    if not response.is_success:
        raise UpstreamFetchError(f"Image API error: {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise UpstreamFetchError(f"Image API returned invalid JSON: {e}") from e

    images = data.get("images") if isinstance(data, dict) else None
    if not isinstance(images, list):
        images = []
    urls = [
        image["url"] for image in images
        if isinstance(image, dict) and isinstance(image.get("url"), str) and image["url"]
    ]
    if not urls:
        raise UpstreamFetchError("Image API returned no images")
    return urls[:len(prompts)]
