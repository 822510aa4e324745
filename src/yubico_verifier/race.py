"""
Racing one verification request across several validation servers.

Every server gets the same signed request. Answers are handled in the order
they arrive:

- the first OK answer that validates wins and the other requests are
  cancelled;
- an OK answer that fails validation aborts the whole race with
  TrustViolationError, since it points at a forged or tampered response;
- non-OK answers are kept, and the first one is reported if nothing
  better arrives;
- with no answer at all, TransportError is raised.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Awaitable, Callable, Sequence

from .exceptions import MalformedResponseError, TransportError
from .models import ResponseStatus, ServerRecord
from .response import parse_response, validate_response

logger = logging.getLogger(__name__)

AsyncFetch = Callable[[str], Awaitable[str]]
SyncFetch = Callable[[str], str]


class _Referee:
    """Decides the race outcome from answers in completion order."""

    def __init__(self, nonce: str, secret: str, otp: str):
        self.nonce = nonce
        self.secret = secret
        self.otp = otp
        self.failed: list[ServerRecord] = []

    def consider(self, server: str, body: str) -> ServerRecord | None:
        """
        Judge one answer.

        Returns the record if it is a validated OK answer, None if the race
        should go on. Raises TrustViolationError for an OK answer that does
        not validate.
        """
        try:
            record = parse_response(body)
        except MalformedResponseError as e:
            logger.warning("Ignoring unparseable response from %s: %s", server, e)
            return None

        if record.status_code is ResponseStatus.OK:
            validate_response(record, self.nonce, self.secret, self.otp)
            logger.debug("Validated OK response from %s", server)
            return record

        logger.debug("Server %s answered %s", server, record.status)
        self.failed.append(record)
        return None

    def settle(self) -> ServerRecord:
        """Outcome when no server produced a validated OK answer."""
        if not self.failed:
            raise TransportError("Yubico API server network error")

        # Raises the error matching the first failure
        validate_response(self.failed[0], self.nonce, self.secret, self.otp)
        return self.failed[0]


async def race(
    servers: Sequence[str],
    fetch: AsyncFetch,
    nonce: str,
    secret: str,
    otp: str,
) -> ServerRecord:
    """
    Send a request to every server concurrently and return the winner.

    Args:
        servers: Server hostnames
        fetch: Coroutine function returning the response body for a server,
            or raising TransportError
        nonce: Nonce sent with the request
        secret: Base64 encoded API secret
        otp: OTP sent with the request

    Returns:
        The first validated OK record

    Raises:
        TrustViolationError: If an OK answer fails validation
        ProtocolStatusError: If servers only answered with non-OK statuses
        TransportError: If no server answered
    """
    referee = _Referee(nonce, secret, otp)

    async def attempt(server: str) -> tuple[str, str | None]:
        try:
            return server, await fetch(server)
        except TransportError as e:
            logger.warning("No answer from %s: %s", server, e)
            return server, None

    tasks = [asyncio.create_task(attempt(server)) for server in servers]
    try:
        for next_done in asyncio.as_completed(tasks):
            server, body = await next_done
            if body is None:
                continue
            record = referee.consider(server, body)
            if record is not None:
                return record
    finally:
        await _cancel_pending(tasks)

    return referee.settle()


async def _cancel_pending(tasks: list[asyncio.Task]) -> None:
    """Cancel unfinished tasks and wait for them to wind down."""
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        logger.debug("Cancelled %d outstanding request(s)", len(pending))
        await asyncio.gather(*pending, return_exceptions=True)


def race_sync(
    servers: Sequence[str],
    fetch: SyncFetch,
    nonce: str,
    secret: str,
    otp: str,
) -> ServerRecord:
    """
    Thread based counterpart of race().

    Requests that are still running when the race is decided are left to
    finish in the background and their answers are discarded; requests
    that have not started are cancelled.
    """
    referee = _Referee(nonce, secret, otp)

    executor = ThreadPoolExecutor(
        max_workers=max(len(servers), 1),
        thread_name_prefix="yubico-verify",
    )
    futures = {executor.submit(fetch, server): server for server in servers}
    try:
        for future in as_completed(futures):
            server = futures[future]
            try:
                body = future.result()
            except TransportError as e:
                logger.warning("No answer from %s: %s", server, e)
                continue
            record = referee.consider(server, body)
            if record is not None:
                return record
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return referee.settle()
