"""
Fallback Chain Utilities
Try a sequence of lookup strategies and keep the first usable result
"""
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple
import logging

from app.errors import UpstreamError

logger = logging.getLogger(__name__)

Strategy = Tuple[str, Callable[[], Awaitable[Optional[Any]]]]

async def first_successful(strategies: Sequence[Strategy]) -> Optional[Any]:
    """
    Run strategies in order until one returns a result

    A strategy that returns None or fails talking to Shopify hands over
    to the next one. Other exceptions propagate.

    Args:
        strategies: (name, zero-argument coroutine function) pairs

    Returns:
        First non-None result, or None when every strategy came up empty
    """
    for name, strategy in strategies:
        try:
            result = await strategy()
        except UpstreamError as e:
            logger.warning(f"Strategy '{name}' failed: {e}. Trying next.")
            continue
        if result is not None:
            if name != strategies[0][0]:
                logger.info(f"Resolved via fallback strategy '{name}'")
            return result
        logger.debug(f"Strategy '{name}' found nothing")
    return None
