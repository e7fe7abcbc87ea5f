"""
Transaction Gate
Rejects client batches declared against a superseded server state.

A batch is applied only when its transaction id equals the session's
current one. Any other id means the client saw an older baseline (a
second tab, a retried request) and must resynchronize; nothing from the
batch is applied.
"""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..app.component import Component
from ..core import get_logger, trace_operation
from ..core.errors import IllegalPropertyError, SessionStateError, SyncError
from ..core.tracing import get_trace_id
from ..monitoring import metrics_collector
from ..serial.client_message import ClientUpdateBatch
from ..serial.serializer import Document, TreeSerializer
from .context import SessionContext

logger = get_logger(__name__)

ActionHandler = Callable[[Component, str], Any]


class ResyncDirective(BaseModel):
    """Tells the client to discard its view and reload the current state."""

    model_config = ConfigDict(frozen=True)

    expected_transaction_id: int
    declared_transaction_id: int
    reason: str = "stale_transaction"


class TransactionGate:
    """Validates and applies client update batches for one session."""

    def __init__(self, session: SessionContext) -> None:
        self.session = session

    def check(self, batch: ClientUpdateBatch) -> Result[ClientUpdateBatch, ResyncDirective]:
        """Compare the batch's transaction id with the session's current one."""
        if not self.session.initialized:
            raise SessionStateError("Transaction gate used before session init")
        if self.session.frozen:
            raise SessionStateError("Transaction gate used on a frozen session")

        expected = self.session.current_transaction_id
        if batch.transaction_id != expected:
            return Failure(
                ResyncDirective(
                    expected_transaction_id=expected,
                    declared_transaction_id=batch.transaction_id,
                )
            )
        return Success(batch)

    def process(
        self,
        batch: ClientUpdateBatch,
        on_action: ActionHandler | None = None,
    ) -> Result[ClientUpdateBatch, ResyncDirective]:
        """
        Apply a batch if it is current.

        Every referenced component is resolved and every update checked
        before the first mutation, so a batch is applied whole or not at all.

        Args:
            batch: Decoded client batch
            on_action: Called with (component, event_type) per action

        Returns:
            Success(batch) when applied, Failure(ResyncDirective) when stale

        Raises:
            InvalidRenderIdError: A batch names an unknown component
            IllegalPropertyError: A batch writes a non-client property
        """
        with trace_operation("transaction_gate", transaction_id=batch.transaction_id):
            result = self.check(batch)
            if not is_successful(result):
                directive = result.failure()
                metrics_collector.record_client_batch("stale")
                logger.warning(
                    "stale_transaction",
                    session_id=self.session.session_id,
                    trace_id=get_trace_id(),
                    expected=directive.expected_transaction_id,
                    declared=directive.declared_transaction_id,
                )
                return result

            try:
                updates = [
                    (self._writable_component(update.client_render_id, update.name), update)
                    for update in batch.updates
                ]
                actions = [
                    (self.session.component_by_client_render_id(action.client_render_id), action)
                    for action in batch.actions
                ]
            except SyncError:
                metrics_collector.record_client_batch("rejected")
                raise

            for component, update in updates:
                if update.index is None:
                    component.set(update.name, update.value)
                else:
                    component.set_index(update.name, update.index, update.value)

            if on_action is not None:
                for component, action in actions:
                    on_action(component, action.event_type)

            metrics_collector.record_client_batch("accepted")
            logger.debug(
                "client_batch_applied",
                session_id=self.session.session_id,
                updates=len(updates),
                actions=len(actions),
            )
            return result

    def process_document(
        self,
        serializer: TreeSerializer,
        document: Document,
        on_action: ActionHandler | None = None,
    ) -> Result[ClientUpdateBatch, ResyncDirective]:
        """Decode a client message and process it."""
        return self.process(serializer.load_client_message(document), on_action)

    def _writable_component(self, client_render_id: str, name: str) -> Component:
        component = self.session.component_by_client_render_id(client_render_id)
        if not component.accepts_client_property(name):
            raise IllegalPropertyError(
                f"Property {name!r} of {component.type_name} is not client-writable"
            )
        return component


__all__ = ["ActionHandler", "ResyncDirective", "TransactionGate"]
