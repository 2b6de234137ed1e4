"""Provider fallback helpers shared by every pipeline stage."""
import logging
from typing import List, Optional, Sequence, TypeVar

from app.core.exceptions import PipelineError, ProviderError
from app.services.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


async def first_success(
    adapters: Sequence[ProviderAdapter[RequestT, ResultT]],
    request: RequestT,
    stage: str,
    failure_message: str,
) -> ResultT:
    """
    Try each adapter in order and return the first successful result.

    Args:
        adapters: Providers in priority order (primary first).
        request: Request passed unchanged to every adapter.
        stage: Stage name for logging and error reporting.
        failure_message: User-facing message when every provider fails.

    Raises:
        PipelineError: If every adapter raised ProviderError (or none were given).
    """
    errors: List[ProviderError] = []

    for adapter in adapters:
        try:
            result = await adapter.invoke(request)
        except ProviderError as e:
            logger.warning(f"[{stage}] {e.message}", extra={"extra_data": {"stage": stage, "provider": e.provider}})
            errors.append(e)
            continue

        if errors:
            logger.info(
                f"[{stage}] Recovered with fallback provider '{adapter.name}' after {len(errors)} failure(s)",
                extra={"extra_data": {"stage": stage, "provider": adapter.name}},
            )
        return result

    logger.error(f"[{stage}] All {len(errors)} provider(s) failed")
    raise PipelineError(stage, failure_message, errors)


async def best_effort(
    adapter: ProviderAdapter[RequestT, ResultT],
    request: RequestT,
    stage: str,
) -> Optional[ResultT]:
    """Invoke a single adapter; a ProviderError degrades to ``None``."""
    try:
        return await adapter.invoke(request)
    except ProviderError as e:
        logger.warning(
            f"[{stage}] Degraded, continuing without result: {e.message}",
            extra={"extra_data": {"stage": stage, "provider": e.provider}},
        )
        return None
