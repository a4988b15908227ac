"""Running authenticated player requests: queue, transaction, envelope."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi.concurrency import run_in_threadpool

from hearth_backend.api.services.sessions import ModifiableSession
from hearth_backend.game_logic import Player, WorkshopInvariantError

if TYPE_CHECKING:
    from hearth_backend.api.services.session_queue import SessionQueueRegistry
    from hearth_backend.api.services.sessions import SessionRecord
    from hearth_backend.catalog import CatalogService
    from hearth_backend.database import DocumentTransaction, TransactionRunner
    from hearth_backend.game_logic import WorkshopConfiguration
    from hearth_backend.shared.clock import Clock

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RequestContext:
    """What a handler gets to work with during one transaction attempt."""

    session: ModifiableSession
    player: Player


@dataclass(slots=True)
class RequestOutcome:
    result: Any
    updates: dict[str, int] | None


Handler = Callable[[RequestContext], Any]


class PlayerRequestService:
    """Executes player handlers one at a time per session.

    A handler returning ``None`` rejects the request: its transaction is
    discarded and :meth:`run` returns ``None``. Otherwise the invalidated
    sequence numbers are bumped in the same transaction, which then commits.
    """

    def __init__(
        self,
        *,
        runner: TransactionRunner,
        catalog: CatalogService,
        clock: Clock,
        queues: SessionQueueRegistry,
        configuration: WorkshopConfiguration | None = None,
    ) -> None:
        self._runner = runner
        self._catalog = catalog
        self._clock = clock
        self._queues = queues
        self._configuration = configuration

    async def run(
        self,
        session: SessionRecord,
        handler: Handler,
        *,
        send_updates: bool = True,
    ) -> RequestOutcome | None:
        async with self._queues.hold(session.session_id):
            return await run_in_threadpool(self._execute, session, handler, send_updates)

    def _execute(
        self, session: SessionRecord, handler: Handler, send_updates: bool
    ) -> RequestOutcome | None:
        def attempt(transaction: DocumentTransaction) -> RequestOutcome | None:
            context = RequestContext(
                session=ModifiableSession(session, transaction),
                player=Player(
                    session.user_id,
                    transaction,
                    catalog=self._catalog,
                    clock=self._clock,
                    configuration=self._configuration,
                ),
            )
            result = handler(context)
            if result is None:
                return None
            updates = context.session.commit_sequences()
            return RequestOutcome(result=result, updates=updates if send_updates else None)

        try:
            return self._runner.run(attempt)
        except WorkshopInvariantError:
            logger.exception("Workshop invariant violated for user %s", session.user_id)
            raise


__all__ = ["Handler", "PlayerRequestService", "RequestContext", "RequestOutcome"]
