"""Capped exponential-backoff retries around single GitHub calls."""

from __future__ import annotations

import asyncio
import dataclasses
import typing as typ

import tenacity

from .errors import ConnectorError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

type RetryListener = cabc.Callable[[int, ConnectorError, float], None]


@dataclasses.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How often, and how patiently, a failing call is repeated.

    Attributes
    ----------
    max_attempts
        Total number of calls, including the first. ``1`` disables retries.
    base_delay_s
        Delay before the second attempt.
    multiplier
        Factor applied to the delay after each failed attempt.
    max_delay_s
        Upper bound for any single delay.

    """

    max_attempts: int = 3
    base_delay_s: float = 0.5
    multiplier: float = 2.0
    max_delay_s: float = 10.0

    def __post_init__(self) -> None:
        """Validate the policy bounds."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.base_delay_s < 0 or self.max_delay_s < 0:
            msg = "retry delays must be non-negative"
            raise ValueError(msg)
        if self.multiplier < 1:
            msg = f"multiplier must be >= 1, got {self.multiplier}"
            raise ValueError(msg)

    def stop(self) -> tenacity.stop.stop_base:
        """Return the tenacity stop condition for this policy."""
        return tenacity.stop_after_attempt(self.max_attempts)

    def wait(self) -> tenacity.wait.wait_base:
        """Return the tenacity backoff schedule for this policy."""
        return tenacity.wait_exponential(
            multiplier=self.base_delay_s,
            exp_base=self.multiplier,
            max=self.max_delay_s,
        )


NO_RETRY = RetryPolicy(max_attempts=1, base_delay_s=0.0)


def _is_transient(exc: ConnectorError) -> bool:
    return exc.is_transient


def _notify(listener: RetryListener) -> cabc.Callable[[tenacity.RetryCallState], None]:
    def before_sleep(state: tenacity.RetryCallState) -> None:
        outcome = state.outcome
        action = state.next_action
        if outcome is None or action is None:
            return
        error = outcome.exception()
        if isinstance(error, ConnectorError):
            listener(state.attempt_number, error, action.sleep)

    return before_sleep


async def call_with_retries[T](
    operation: cabc.Callable[[], cabc.Awaitable[T]],
    *,
    policy: RetryPolicy,
    should_retry: cabc.Callable[[ConnectorError], bool] = _is_transient,
    on_retry: RetryListener | None = None,
    sleep: cabc.Callable[[float], cabc.Awaitable[object]] = asyncio.sleep,
) -> T:
    """Await ``operation`` until it succeeds or the policy is exhausted.

    Only :class:`ConnectorError` failures accepted by ``should_retry`` are
    repeated; by default these are transport failures and 5xx responses.
    Other errors, and the last transient error once ``policy.max_attempts``
    calls have failed, propagate unchanged.

    Parameters
    ----------
    operation
        Zero-argument coroutine factory performing one call.
    policy
        Attempt count and backoff schedule.
    should_retry
        Predicate deciding whether a failure is worth repeating.
    on_retry
        Optional callback receiving ``(attempt, error, delay)`` before each
        pause.
    sleep
        Awaitable used to pause between attempts.

    """
    retrying = tenacity.AsyncRetrying(
        sleep=sleep,
        stop=policy.stop(),
        wait=policy.wait(),
        retry=tenacity.retry_if_exception(
            lambda exc: isinstance(exc, ConnectorError) and should_retry(exc)
        ),
        before_sleep=_notify(on_retry) if on_retry is not None else None,
        reraise=True,
    )
    return await retrying(operation)
