"""
Product Scraper Service
Best-effort extraction of product facts from an arbitrary product page
"""
import logging
import re
from typing import List, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from ..config import (
    PAGE_FETCH_TIMEOUT,
    BROWSER_USER_AGENT,
    MAX_HIGHLIGHTS,
    MAX_IMAGES,
    HIGHLIGHT_SELECTORS,
)
from ..errors import UpstreamFetchError
from ..models import ProductData

logger = logging.getLogger(__name__)

ABSOLUTE_URL = re.compile(r'^https?://', re.IGNORECASE)


async def scrape_product(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> ProductData:
    """
    Fetch a product page and parse whatever facts it exposes
    Args:
        url: Product page URL
        transport: Optional httpx transport (tests inject a mock one)
    Returns:
        ProductData; on any failure only sourceUrl is set
    """
    logger.info(f"Scraping product page: {url}")

    try:
        html = await fetch_page(url, transport)
    except UpstreamFetchError as e:
        logger.warning(f"Product page fetch failed for {url}: {e}")
        return ProductData(sourceUrl=url)
    except Exception as e:
        logger.error(f"Unexpected error fetching {url}: {e}", exc_info=True)
        return ProductData(sourceUrl=url)

    try:
        return parse_product(html, url)
    except Exception as e:
        logger.error(f"Failed to parse product page {url}: {e}", exc_info=True)
        return ProductData(sourceUrl=url)


async def fetch_page(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """GET the page with a browser User-Agent, raising UpstreamFetchError on failure"""
    try:
        async with httpx.AsyncClient(
            timeout=PAGE_FETCH_TIMEOUT,
            follow_redirects=True,
            headers={'User-Agent': BROWSER_USER_AGENT},
            transport=transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text
    except httpx.HTTPError as e:
        raise UpstreamFetchError(str(e) or e.__class__.__name__) from e


def parse_product(html: str, url: str) -> ProductData:
    soup = BeautifulSoup(html, 'html.parser')

    highlights = extract_highlights(soup)
    specifications = extract_specifications(soup)
    images = extract_images(soup)

    product = ProductData(
        title=extract_title(soup),
        description=extract_description(soup),
        highlights=highlights or None,
        specifications=specifications or None,
        price=extract_price(soup),
        brand=extract_brand(soup),
        images=images or None,
        sourceUrl=url,
    )
    logger.info(
        f"Extracted product '{product.title or 'untitled'}': "
        f"{len(highlights)} highlights, {len(specifications)} specs, {len(images)} images"
    )
    return product


def clean_text(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty strings become None"""
    if not value:
        return None
    cleaned = re.sub(r'\s+', ' ', value).strip()
    return cleaned or None


def meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    meta = soup.find('meta', attrs=attrs)
    if meta:
        return clean_text(meta.get('content'))
    return None


# =============================================================================
# EXTRACTION FUNCTIONS
# =============================================================================

def extract_title(soup: BeautifulSoup) -> Optional[str]:
    og_title = meta_content(soup, property='og:title')
    if og_title:
        return og_title
    title_tag = soup.find('title')
    if title_tag:
        return clean_text(title_tag.get_text())
    return None


def extract_description(soup: BeautifulSoup) -> Optional[str]:
    return meta_content(soup, name='description') or meta_content(soup, property='og:description')


def extract_price(soup: BeautifulSoup) -> Optional[str]:
    price = meta_content(soup, property='product:price:amount')
    if price:
        return price
    price_elem = soup.find(attrs={'itemprop': 'price'})
    if price_elem:
        return clean_text(price_elem.get('content')) or clean_text(price_elem.get_text())
    return None


def extract_brand(soup: BeautifulSoup) -> Optional[str]:
    brand_elem = soup.find(attrs={'itemprop': 'brand'})
    if brand_elem:
        brand = clean_text(brand_elem.get_text())
        if brand:
            return brand
    return meta_content(soup, property='product:brand')


def extract_images(soup: BeautifulSoup) -> List[str]:
    images: List[str] = []
    for img in soup.find_all('img'):
        src = img.get('src') or img.get('data-src')
        if src and ABSOLUTE_URL.match(src) and src not in images:
            images.append(src)
    return images[:MAX_IMAGES]


def extract_highlights(soup: BeautifulSoup) -> List[str]:
    highlights = []
    for item in soup.select(', '.join(HIGHLIGHT_SELECTORS)):
        text = clean_text(item.get_text())
        if text:
            highlights.append(text)
        if len(highlights) >= MAX_HIGHLIGHTS:
            break
    return highlights


def extract_specifications(soup: BeautifulSoup) -> Dict[str, str]:
    specs: Dict[str, str] = {}

    # schema.org microdata first
    for prop in soup.find_all(attrs={'itemprop': 'additionalProperty'}):
        name_elem = prop.find(attrs={'itemprop': 'name'})
        value_elem = prop.find(attrs={'itemprop': 'value'})
        key = clean_text(name_elem.get_text()) if name_elem else None
        value = None
        if value_elem:
            value = clean_text(value_elem.get_text()) or clean_text(value_elem.get('content'))
        if key and value:
            specs[key] = value

    if specs:
        return specs

    for row in soup.select('table tr'):
        cells = row.find_all(['td', 'th'])
        if len(cells) == 2:
            key = clean_text(cells[0].get_text())
            value = clean_text(cells[1].get_text())
            if key and value:
                specs[key] = value
    return specs
