"""
Dispatch best-effort side effects (notifications, audit) off the request path.

With FastAPI BackgroundTasks the call runs after the response is sent; without one (scripts, direct
service calls) it runs inline. Either way the sinks swallow their own failures, so the caller's
admission or status change is never affected.
"""
import logging
from typing import Any, Callable

from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)


def dispatch(background: BackgroundTasks | None, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    if background is not None:
        background.add_task(fn, *args, **kwargs)
        return
    try:
        fn(*args, **kwargs)
    except Exception as e:
        logger.warning("Side effect %s failed: %s", getattr(fn, "__name__", fn), e, exc_info=True)
