"""
Run independent callables concurrently and report the first failure.
"""
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def run_first_err(*fns: Callable[[], None], max_workers: Optional[int] = None) -> None:
    """
    Run each callable on a thread pool and wait for all of them, or for the
    first one to raise.

    The exception of the first observed failure is re-raised. Callables that have
    not started yet are cancelled; ones already running are not interrupted
    and may still complete after this returns.

    Args:
        *fns: Zero-argument callables
        max_workers: Pool size (default: one thread per callable)
    """
    if not fns:
        return

    executor = ThreadPoolExecutor(
        max_workers=max_workers or len(fns),
        thread_name_prefix="objectstore",
    )
    try:
        futures = [executor.submit(fn) for fn in fns]
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)

        failed = [future for future in done if future.exception() is not None]
        if failed:
            if not_done:
                logger.debug(f"{len(not_done)} task(s) left running after first failure")
            raise failed[0].exception()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
