"""
Sample questions endpoint.
"""

import logging

from fastapi import APIRouter

from modules.debates.models import SamplesResponse
from modules.debates.samples import list_samples

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/samples", response_model=SamplesResponse)
async def get_samples() -> SamplesResponse:
    """List curated sample questions, four per domain."""
    samples = list_samples()
    logger.debug(f"samples.list count={samples.count}")
    return samples
