from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from loguru import logger

from ppdiff.core.exceptions import IngestionError, PlayEvaluationError, UserNotFoundError
from ppdiff.models.profile import ProfileComparison
from ppdiff.models.ruleset import Ruleset
from ppdiff.services.container import DatabaseNotConfiguredError, ServiceContainer, SourceName, get_container
from ppdiff.services.formatting import render_comparison

router = APIRouter(prefix="/profile", tags=["profile"])


async def _compare(container: ServiceContainer, user: str, ruleset: Ruleset, source: SourceName) -> ProfileComparison:
    """Run a comparison and translate domain errors into HTTP errors."""
    try:
        service = container.profile_service(source)
        return await service.compare(user, ruleset)
    except DatabaseNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except IngestionError as e:
        logger.error(f"Ingestion failed for '{user}': {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except PlayEvaluationError as e:
        logger.error(f"Evaluation failed for '{user}': {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{user}", response_model=ProfileComparison, summary="Compare live and local profile pp")
async def get_profile(
    user: str,
    ruleset: int = Query(0, ge=0, le=3, description="0 - osu!, 1 - taiko, 2 - catch, 3 - mania"),
    source: SourceName = Query("api", description="Where the top plays are read from"),
    container: ServiceContainer = Depends(get_container),
) -> ProfileComparison:
    return await _compare(container, user, Ruleset(ruleset), source)


@router.get("/{user}/table", response_class=PlainTextResponse, summary="Comparison rendered as a text table")
async def get_profile_table(
    user: str,
    ruleset: int = Query(0, ge=0, le=3),
    source: SourceName = Query("api"),
    container: ServiceContainer = Depends(get_container),
) -> str:
    comparison = await _compare(container, user, Ruleset(ruleset), source)
    return render_comparison(comparison)
