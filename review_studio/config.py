"""
Configuration, constants, and generation rules
"""
import os

# Server
PORT = int(os.getenv("PORT", "8080"))
SERVICE_VERSION = "1.0.0"

# OpenAI Configuration
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = 0.5

# Page scraping
PAGE_FETCH_TIMEOUT = 10
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
MAX_HIGHLIGHTS = 10
MAX_IMAGES = 6
HIGHLIGHT_SELECTORS = [
    "[data-qa='product-description'] li",
    ".product-highlights li",
    ".a-unordered-list li",
]

# Image generation
IMAGE_SERVICE_URL = os.getenv("NANO_BANANA_API_URL", "https://api.nanobanana.com/v1/images/generate")
IMAGE_SERVICE_TIMEOUT = 20
IMAGE_ASPECT_RATIO = "4:3"
MAX_IMAGE_COUNT = 3
DEFAULT_IMAGE_STYLE = "Product hero shot, cinematic lighting"
PLACEHOLDER_URL_TEMPLATE = "https://placehold.co/800x600/{background}/{foreground}.png?text=Product+Image+{index}"
# (background, foreground)
PLACEHOLDER_PALETTE_NO_CREDENTIAL = ("0f172a", "94a3b8")
PLACEHOLDER_PALETTE_SERVICE_FAILED = ("111827", "64748b")

# Structured data
SCHEMA_PRICE_CURRENCY = "BRL"
SCHEMA_AVAILABILITY = "https://schema.org/InStock"

# Spell checking
DICTIONARY_LANGUAGE = os.getenv("DICTIONARY_LANGUAGE", "en")
WORD_CACHE_SIZE = 50000

# Affiliate platforms accepted in requests
AFFILIATE_PLATFORMS = [
    "amazon", "mercadoLivre", "shopee", "magalu", "clickbank",
    "hotmart", "eduzz", "kiwify", "braip",
]

SYSTEM_PROMPT = """You are an SEO-savvy review journalist who writes truthful, conversion-oriented articles.

OBJECTIVE
Return one valid JSON object (no markdown, no comments) with exactly these fields:
{
  "article": "full review article text",
  "seo": {
    "title": "...",
    "metaDescription": "...",
    "keywords": ["..."],
    "ogTitle": "...",
    "ogDescription": "...",
    "canonicalUrl": "optional"
  },
  "reviews": [
    {"reviewer": "...", "rating": 1-5, "summary": "...", "details": "..."}
  ],
  "discoverySchema": null or a schema.org Product object,
  "imagePrompts": ["..."]
}

INPUTS
You will receive one message containing JSON with: locale, targetKeywords, outlineStyle, tone,
geoPersona, callToAction, includeDiscoverySchema, product and affiliateLinks.
Treat the product JSON as the only source of truth. Never invent specifications or prices.

RULES
- Write the article in the language and register of the requested locale, for the described geo persona.
- Follow the requested outline style and tone; weave target keywords in naturally.
- Close the article with the requested call to action.
- Affiliate calls-to-action may reference ONLY the affiliate links present and non-empty in affiliateLinks.
  Never mention a platform whose link is empty and never invent a link.
- Reviews must be original but grounded in product facts. Ratings are integers from 1 to 5.
- Only fill discoverySchema when includeDiscoverySchema is true; otherwise return null.
- imagePrompts: two to three short, concrete photography prompts for the product.
""".strip()
