"""
Application Instance
Owner of one session's component tree and task queues.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable

from ..core import get_logger
from ..core.id import TaskQueueID, new_task_queue_id
from .component import Component

logger = get_logger(__name__)


class TaskQueueHandle:
    """
    Queue of work to run on the next synchronization.

    Handles are compared by identity; ``queue_id`` is for logging.
    """

    def __init__(self) -> None:
        self.queue_id: TaskQueueID = new_task_queue_id()
        self._tasks: deque[Callable[[], Any]] = deque()

    def __repr__(self) -> str:
        return f"<TaskQueueHandle {self.queue_id}>"

    def enqueue(self, task: Callable[[], Any]) -> None:
        self._tasks.append(task)

    def drain(self) -> list[Callable[[], Any]]:
        tasks = list(self._tasks)
        self._tasks.clear()
        return tasks

    def __len__(self) -> int:
        return len(self._tasks)


class ApplicationInstance(ABC):
    """
    Abstract base class for session applications.
    Subclasses implement init() to build the component tree.
    """

    def __init__(self) -> None:
        self.root: Component | None = None
        self.active = False
        self.disposed = False
        self._context_properties: dict[str, Any] = {}
        self._task_queues: list[TaskQueueHandle] = []
        self._next_render_id = 0

    @abstractmethod
    def init(self) -> Component:
        """Build and return the root of the component tree."""
        pass

    def do_init(self) -> None:
        """Run init() and assign render ids to the resulting tree."""
        self.root = self.init()
        self.register(self.root)
        logger.info("application_initialized", application=self.__class__.__name__)

    def register(self, component: Component) -> None:
        """Assign render ids to every node in a subtree that lacks one."""
        for node in component.walk():
            if node.render_id is None:
                self._next_render_id += 1
                node.render_id = str(self._next_render_id)

    def get_component_by_render_id(self, render_id: str) -> Component | None:
        if self.root is None:
            return None
        return self.root.find(render_id)

    # Context properties --------------------------------------------------

    def set_context_property(self, name: str, value: Any) -> None:
        self._context_properties[name] = value

    def get_context_property(self, name: str) -> Any:
        return self._context_properties.get(name)

    # Task queues ---------------------------------------------------------

    def create_task_queue(self) -> TaskQueueHandle:
        handle = TaskQueueHandle()
        self._task_queues.append(handle)
        return handle

    def remove_task_queue(self, handle: TaskQueueHandle) -> None:
        if handle in self._task_queues:
            self._task_queues.remove(handle)

    def task_queues(self) -> list[TaskQueueHandle]:
        return list(self._task_queues)

    # Lifecycle -----------------------------------------------------------

    def activate(self) -> None:
        """Called after the owning session is restored."""
        self.active = True

    def passivate(self) -> None:
        """Called before the owning session is persisted."""
        self.active = False

    def dispose(self) -> None:
        """Release resources when the session ends."""
        self.disposed = True
        self.active = False
        self._task_queues.clear()
        logger.info("application_disposed", application=self.__class__.__name__)


__all__ = ["ApplicationInstance", "TaskQueueHandle"]
