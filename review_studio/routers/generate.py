"""
Review Article Router
Turns a product URL into a localized review article
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..errors import ConfigurationError, UpstreamParseError
from ..models import GenerateRequest, GenerateResponse
from ..services.pipeline import PipelineContext, build_review_article, get_pipeline_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Review Articles"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_review_article(
    request: GenerateRequest,
    context: PipelineContext = Depends(get_pipeline_context),
):
    """
    Generate a review article for a product page

    Returns the spell-checked article, SEO metadata, extracted product data,
    reviews, echoed affiliate links, optional discovery schema, images and
    the spell-check corrections.
    """
    logger.info(f"📝 Generating review article for {request.productUrl} ({request.targetLocale})")

    try:
        response = await build_review_article(request, context)
        logger.info(f"✅ Review article ready for {request.productUrl}")
        return response

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except UpstreamParseError as e:
        logger.error(f"Generation response error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to build article: {str(e)}")
