"""Shared service layer utilities.

Services never let a store failure escape: each call is classified into a
StoreResult so logs and metrics can tell "nothing there" from "store broken",
while callers only ever receive the safe default value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from loguru import logger

from app.core.telemetry import record_store_outcome

T = TypeVar("T")


class StoreOutcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of one guarded store call.

    Attributes:
        outcome: Classification used for logging and metrics.
        value: The call's result, or the caller-supplied default on failure.
        error: The exception caught when outcome is FAILED.
    """

    outcome: StoreOutcome
    value: T
    error: Exception | None = None


async def run_store_call(call: Callable[[], Awaitable[T]], default: T) -> StoreResult[T]:
    """
    Await `call` and classify its outcome instead of propagating errors.

    Parameters:
        call: Zero-argument coroutine function performing the store work.
        default: Value carried by the result when the call raises.

    Returns:
        StoreResult[T]: FAILED with `default` if the call raised, EMPTY if it returned a falsy value, OK otherwise.
    """
    try:
        value = await call()
    except Exception as e:
        return StoreResult(StoreOutcome.FAILED, default, e)
    if value is None or value == []:
        return StoreResult(StoreOutcome.EMPTY, value)
    return StoreResult(StoreOutcome.OK, value)


def unwrap(operation: str, result: StoreResult[T]) -> T:
    """
    Log and count a StoreResult, then hand back its value.

    Parameters:
        operation: Name of the service operation, used as log context and metric label.
        result: The classified outcome of the store call.

    Returns:
        T: `result.value`, which is the safe default when the call failed.
    """
    record_store_outcome(operation, result.outcome.value)
    if result.outcome is StoreOutcome.FAILED:
        logger.opt(exception=result.error).error(
            f"{operation} failed, returning default: {result.error}"
        )
    elif result.outcome is StoreOutcome.EMPTY:
        logger.debug(f"{operation} returned no data")
    return result.value
