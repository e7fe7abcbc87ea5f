"""Id table: short-lived opaque ids for arbitrary in-session objects."""

from typing import Any, Iterable

from ..core.id import ObjectID, new_object_id


class IdTable:
    """
    Assigns one opaque id per object and resolves ids back to objects.

    Entries hold a strong reference until evicted, either one at a time with
    ``release`` or in bulk with ``sweep``. An object that the application
    forgets but never releases stays in the table.
    """

    def __init__(self) -> None:
        self._objects: dict[ObjectID, Any] = {}
        self._ids: dict[int, ObjectID] = {}

    def register(self, obj: Any) -> ObjectID:
        """Return the object's id, assigning one on first registration."""
        object_id = self._ids.get(id(obj))
        if object_id is None:
            object_id = new_object_id()
            self._ids[id(obj)] = object_id
            self._objects[object_id] = obj
        return object_id

    def get(self, object_id: str) -> Any:
        return self._objects.get(object_id)

    def id_of(self, obj: Any) -> ObjectID | None:
        return self._ids.get(id(obj))

    def release(self, object_id: str) -> bool:
        if object_id not in self._objects:
            return False
        obj = self._objects.pop(object_id)
        del self._ids[id(obj)]
        return True

    def sweep(self, live: Iterable[Any]) -> int:
        """Evict every entry whose object is not in ``live``; return the count."""
        live_ids = {id(obj) for obj in live}
        stale = [object_id for key, object_id in self._ids.items() if key not in live_ids]
        for object_id in stale:
            self.release(object_id)
        return len(stale)

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: str) -> bool:
        return object_id in self._objects


__all__ = ["IdTable"]
