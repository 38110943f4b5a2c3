"""Request/response correlation on top of one-way messages.

A correlated call creates a PendingRequest holding an asyncio future, sends
its request, and waits. The single registry callback for the response event
looks up the pending entry by id and completes it. Every entry is removed
exactly once: on the first matching response, on timeout, when its last
waiter goes away, or when the endpoint is closed. Responses for ids that
are no longer pending are ignored.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..errors import RequestTimeoutError

logger = logging.getLogger(__name__)


class RequestIdGenerator:
    """Generates request ids unique among one endpoint's requests.

    The millisecond clock alone can repeat within a tick, so each id also
    carries a per-generator counter and a random suffix:

        ad_1731234567890_3_9f1c2a7b
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._counter = itertools.count(1)

    def next(self) -> str:
        clock = int(time.time() * 1000)
        return f"{self.prefix}_{clock}_{next(self._counter)}_{uuid.uuid4().hex[:8]}"


@dataclass
class PendingRequest:
    """A correlated request waiting for its response."""

    request_id: str
    result_event: str
    future: asyncio.Future[Any]
    handler: Callable[[Any], None] | None = None
    waiters: int = 0
    created_at: float = field(default_factory=time.monotonic)

    @property
    def done(self) -> bool:
        return self.future.done()


class PendingRequests:
    """Table of in-flight requests for one response event family.

    Args:
        name: Label used in log messages (e.g. "ad", "data")
        on_removed: Called once for every entry leaving the table, after removal
    """

    def __init__(
        self,
        name: str,
        on_removed: Callable[[PendingRequest], None] | None = None,
    ) -> None:
        self.name = name
        self._pending: dict[str, PendingRequest] = {}
        self._on_removed = on_removed

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._pending

    def get(self, request_id: str) -> PendingRequest | None:
        return self._pending.get(request_id)

    @property
    def request_ids(self) -> list[str]:
        return list(self._pending)

    def create(
        self,
        request_id: str,
        result_event: str,
        handler: Callable[[Any], None] | None = None,
    ) -> PendingRequest:
        """Register a new pending request. Must be called from a running loop.

        Raises:
            ValueError: If `request_id` is already pending
        """
        if request_id in self._pending:
            raise ValueError(f"Duplicate {self.name} request id: {request_id}")

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        pending = PendingRequest(
            request_id=request_id,
            result_event=result_event,
            future=future,
            handler=handler,
        )
        self._pending[request_id] = pending
        logger.debug(f"Pending {self.name} request {request_id}")
        return pending

    def resolve(self, request_id: str, value: Any) -> bool:
        """Complete a pending request successfully.

        Returns:
            False if no such request is pending (late or duplicate response)
        """
        pending = self._pending.get(request_id)
        if pending is None:
            logger.debug(f"Ignoring response for unknown {self.name} request {request_id}")
            return False
        self._remove(pending)
        if pending.future.done():
            return False
        pending.future.set_result(value)
        return True

    def reject(self, request_id: str, error: BaseException) -> bool:
        """Fail a pending request with `error`."""
        pending = self._pending.get(request_id)
        if pending is None:
            logger.debug(f"Ignoring error for unknown {self.name} request {request_id}")
            return False
        self._remove(pending)
        if pending.future.done():
            return False
        pending.future.set_exception(error)
        return True

    def reject_all(self, error: BaseException) -> int:
        """Fail every pending request. Returns the number rejected."""
        count = 0
        for pending in list(self._pending.values()):
            self._remove(pending)
            if not pending.future.done():
                pending.future.set_exception(error)
                count += 1
        return count

    async def wait(self, pending: PendingRequest, timeout: float | None = None) -> Any:
        """Wait for `pending` to complete.

        Several callers may wait on the same entry. A caller that times out
        or is cancelled only stops its own wait. The entry is dropped once
        its last waiter leaves.

        Raises:
            RequestTimeoutError: If `timeout` seconds pass without a response
        """
        pending.waiters += 1
        try:
            if timeout is None:
                return await asyncio.shield(pending.future)
            return await asyncio.wait_for(asyncio.shield(pending.future), timeout)
        except TimeoutError:
            age = time.monotonic() - pending.created_at
            logger.warning(
                f"{self.name} request {pending.request_id} timed out after {timeout}s "
                f"(pending for {age:.2f}s)"
            )
            raise RequestTimeoutError(pending.request_id, timeout or 0.0) from None
        finally:
            pending.waiters -= 1
            if pending.waiters <= 0 and not pending.future.done():
                self._remove(pending)
                pending.future.cancel()

    def _remove(self, pending: PendingRequest) -> None:
        if self._pending.get(pending.request_id) is not pending:
            return
        del self._pending[pending.request_id]
        if self._on_removed is not None:
            self._on_removed(pending)
