from collections.abc import Awaitable

from src.platform.logging.loguru_io import Logger


async def dispatch_after_commit(*, notification: Awaitable[None], description: str) -> None:
    """
    Await a notification whose transaction has already committed.

    Dispatch is best effort: a failure is logged and never reaches the caller.
    """
    try:
        await notification
    except Exception as e:
        Logger.base.warning(f'📭 [NOTIFY] {description} failed: {type(e).__name__}: {e}')
