"""
Session Context
Per-session render state, transaction counter and application lifecycle.

Thread safety: none. The transport must serialize all access to one
session; at most one mutating exchange is processed at a time.
"""

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict

from ..app.application import ApplicationInstance, TaskQueueHandle
from ..app.component import Component
from ..core import get_logger, get_settings, Settings
from ..core.errors import InvalidRenderIdError, SessionStateError
from ..core.id import Prefix, SessionID, extract_prefix, is_valid, new_session_id
from ..monitoring import metrics_collector
from .id_table import IdTable
from .intervals import CallbackIntervals

logger = get_logger(__name__)

CLIENT_RENDER_ID_PREFIX = "c_"
CONTAINER_CONTEXT_PROPERTY = "uisync.container_context"
PROPERTY_CLIENT_CONFIGURATION = "clientConfiguration"


class SessionSnapshot(BaseModel):
    """Persistable scalars of a frozen session."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    transaction_id: int
    initialized: bool
    character_encoding: str
    initial_request_parameters: dict[str, Any]


class SessionContext:
    """
    State held for one user session.

    Lifecycle: created on first contact, ``init`` exactly once, optionally
    ``freeze``/``thaw`` across session persistence, ``dispose`` at end.

    Render state is keyed by component identity. Removing it when a
    component is destroyed is the caller's responsibility.
    """

    def __init__(
        self,
        request_parameters: Mapping[str, Any] | None = None,
        settings: Settings | None = None,
        session_id: SessionID | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.session_id: SessionID = session_id or new_session_id()
        self.character_encoding = self._settings.character_encoding
        self._initial_request_parameters: dict[str, Any] = dict(request_parameters or {})

        self._application: ApplicationInstance | None = None
        self._initialized = False
        self._disposed = False
        self._frozen = False
        self._transaction_id = 0
        self._render_states: dict[Component, Any] = {}

        self.client_properties: dict[str, Any] = {}
        self._client_configuration: dict[str, Any] | None = None
        self._pending_property_updates: list[str] = []

        # Not persistable; dropped by freeze() and re-derived on demand
        self._transport_session: Any = None
        self._id_table: IdTable | None = None
        self._callback_intervals: CallbackIntervals | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, application_factory: Callable[[], ApplicationInstance]) -> ApplicationInstance:
        """
        Create and initialize the session's application.

        Raises:
            SessionStateError: If the session was already initialized
        """
        if self._initialized:
            raise SessionStateError("Attempt to initialize an already initialized session")
        if self._disposed:
            raise SessionStateError("Attempt to initialize a disposed session")

        application = application_factory()
        application.set_context_property(CONTAINER_CONTEXT_PROPERTY, self)
        application.do_init()

        self._application = application
        self._initialized = True
        metrics_collector.session_started()
        logger.info("session_initialized", session_id=self.session_id)
        return application

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def application(self) -> ApplicationInstance:
        if self._application is None:
            raise SessionStateError("Session has no application; call init() first")
        return self._application

    def freeze(self) -> SessionSnapshot:
        """
        Prepare for persistence: passivate the application and drop the
        transport handle, id table and interval votes.
        """
        if self._frozen:
            raise SessionStateError("Session is already frozen")
        if self._application is not None:
            self._application.passivate()
        self._transport_session = None
        self._id_table = None
        self._callback_intervals = None
        self._frozen = True
        logger.info("session_frozen", session_id=self.session_id, transaction_id=self._transaction_id)
        return self.snapshot()

    def thaw(self, transport_session: Any = None) -> None:
        """Reattach after persistence and activate the application."""
        if not self._frozen:
            raise SessionStateError("Session is not frozen")
        self._transport_session = transport_session
        self._frozen = False
        if self._application is not None:
            self._application.activate()
        logger.info("session_thawed", session_id=self.session_id)

    @classmethod
    def restore(
        cls,
        snapshot: SessionSnapshot,
        application: ApplicationInstance | None = None,
        settings: Settings | None = None,
    ) -> "SessionContext":
        """
        Rebuild a frozen session from a snapshot and its persisted application.

        The result is frozen; ``thaw`` it to attach a transport and
        activate the application.

        Raises:
            SessionStateError: If the snapshot carries a malformed session id,
                or the application does not match the snapshot's init state
        """
        if not is_valid(snapshot.session_id) or extract_prefix(snapshot.session_id) != Prefix.SESSION:
            raise SessionStateError(f"Invalid session id in snapshot: {snapshot.session_id!r}")
        if snapshot.initialized and application is None:
            raise SessionStateError("Snapshot of an initialized session needs its application")
        if not snapshot.initialized and application is not None:
            raise SessionStateError("Snapshot of an uninitialized session cannot carry an application")

        session = cls(
            snapshot.initial_request_parameters,
            settings=settings,
            session_id=SessionID(snapshot.session_id),
        )
        session.character_encoding = snapshot.character_encoding
        session._transaction_id = snapshot.transaction_id
        session._frozen = True
        if application is not None:
            application.passivate()
            application.set_context_property(CONTAINER_CONTEXT_PROPERTY, session)
            session._application = application
            session._initialized = True
            metrics_collector.session_started()
        logger.info("session_restored", session_id=session.session_id, transaction_id=session._transaction_id)
        return session

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            transaction_id=self._transaction_id,
            initialized=self._initialized,
            character_encoding=self.character_encoding,
            initial_request_parameters=dict(self._initial_request_parameters),
        )

    def dispose(self) -> None:
        """End the session and dispose its application."""
        if self._disposed:
            return
        if self._application is not None:
            self._application.dispose()
            metrics_collector.session_ended()
        self._render_states.clear()
        self._transport_session = None
        self._id_table = None
        self._callback_intervals = None
        self._disposed = True
        logger.info("session_disposed", session_id=self.session_id)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise SessionStateError("Session is frozen; thaw() it first")

    # ------------------------------------------------------------------
    # Transport binding
    # ------------------------------------------------------------------

    def bind(self, transport_session: Any) -> None:
        self._transport_session = transport_session

    @property
    def transport_session(self) -> Any:
        return self._transport_session

    @property
    def initial_request_parameters(self) -> Mapping[str, Any]:
        return MappingProxyType(self._initial_request_parameters)

    # ------------------------------------------------------------------
    # Render state
    # ------------------------------------------------------------------

    def get_render_state(self, component: Component) -> Any:
        return self._render_states.get(component)

    def set_render_state(self, component: Component, render_state: Any) -> None:
        self._check_not_frozen()
        self._render_states[component] = render_state

    def remove_render_state(self, component: Component) -> None:
        self._render_states.pop(component, None)

    def clear_render_states(self) -> None:
        self._render_states.clear()

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def current_transaction_id(self) -> int:
        return self._transaction_id

    def next_transaction_id(self) -> int:
        """Advance the counter for an outgoing server update and return it."""
        self._check_not_frozen()
        self._transaction_id += 1
        return self._transaction_id

    # ------------------------------------------------------------------
    # Id table
    # ------------------------------------------------------------------

    @property
    def id_table(self) -> IdTable:
        self._check_not_frozen()
        if self._id_table is None:
            self._id_table = IdTable()
        return self._id_table

    # ------------------------------------------------------------------
    # Task queue callback intervals
    # ------------------------------------------------------------------

    @property
    def _intervals(self) -> CallbackIntervals:
        self._check_not_frozen()
        if self._callback_intervals is None:
            self._callback_intervals = CallbackIntervals(self._settings.default_callback_interval)
        return self._callback_intervals

    def set_task_queue_callback_interval(self, handle: TaskQueueHandle, interval_ms: int) -> None:
        self._intervals.vote(handle, interval_ms)

    def remove_task_queue(self, handle: TaskQueueHandle) -> None:
        """Explicitly evict a task queue's interval vote."""
        self._intervals.remove(handle)

    def sweep_task_queues(self, live_handles: Iterable[TaskQueueHandle] | None = None) -> int:
        """
        Evict votes of task queues that are no longer live.

        Defaults to the application's current task queues.
        """
        if live_handles is None:
            live_handles = self.application.task_queues()
        return self._intervals.sweep(live_handles)

    def resolve_poll_interval(self) -> int:
        """Smallest registered interval in ms, or the configured default."""
        if self._callback_intervals is None:
            return self._settings.default_callback_interval
        return self._callback_intervals.resolve()

    # ------------------------------------------------------------------
    # Client render ids
    # ------------------------------------------------------------------

    def client_render_id(self, component: Component) -> str:
        return CLIENT_RENDER_ID_PREFIX + str(component.render_id)

    def component_by_client_render_id(self, client_render_id: str) -> Component:
        """
        Resolve a client render id to a live component.

        Raises:
            InvalidRenderIdError: If the id is malformed or unknown
        """
        if not client_render_id.startswith(CLIENT_RENDER_ID_PREFIX) or len(client_render_id) <= len(
            CLIENT_RENDER_ID_PREFIX
        ):
            raise InvalidRenderIdError(client_render_id)
        component = self.application.get_component_by_render_id(
            client_render_id[len(CLIENT_RENDER_ID_PREFIX):]
        )
        if component is None:
            raise InvalidRenderIdError(client_render_id)
        return component

    # ------------------------------------------------------------------
    # Client configuration
    # ------------------------------------------------------------------

    @property
    def client_configuration(self) -> dict[str, Any] | None:
        return self._client_configuration

    def set_client_configuration(self, configuration: dict[str, Any]) -> None:
        """Store configuration and queue it for the next server update."""
        self._check_not_frozen()
        self._client_configuration = configuration
        if PROPERTY_CLIENT_CONFIGURATION not in self._pending_property_updates:
            self._pending_property_updates.append(PROPERTY_CLIENT_CONFIGURATION)

    def pop_property_updates(self) -> list[str]:
        """Session-level properties changed since the last server update."""
        updates = self._pending_property_updates
        self._pending_property_updates = []
        return updates


__all__ = [
    "CLIENT_RENDER_ID_PREFIX",
    "CONTAINER_CONTEXT_PROPERTY",
    "PROPERTY_CLIENT_CONFIGURATION",
    "SessionSnapshot",
    "SessionContext",
]
