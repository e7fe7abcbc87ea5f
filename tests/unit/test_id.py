"""Tests for ID generation system."""

from uisync.core.id import (
    Prefix,
    extract_prefix,
    is_valid,
    new_object_id,
    new_session_id,
    new_task_queue_id,
)


class TestTypedGeneration:
    """Test typed ID generation."""

    def test_session_id_format(self):
        """Session IDs should have correct prefix."""
        id_str = new_session_id()
        assert id_str.startswith("sess_")
        assert extract_prefix(id_str) == Prefix.SESSION
        assert is_valid(id_str)

    def test_task_queue_id_format(self):
        """Task queue IDs should have correct prefix."""
        id_str = new_task_queue_id()
        assert id_str.startswith("tq_")
        assert extract_prefix(id_str) == Prefix.TASK_QUEUE
        assert is_valid(id_str)

    def test_object_id_format(self):
        """Object IDs should have correct prefix."""
        id_str = new_object_id()
        assert id_str.startswith("obj_")
        assert extract_prefix(id_str) == Prefix.OBJECT
        assert is_valid(id_str)

    def test_uniqueness(self):
        """Should generate unique IDs under load."""
        count = 1000
        object_ids = {new_object_id() for _ in range(count)}
        assert len(object_ids) == count


class TestValidation:
    """Test ID validation."""

    def test_invalid_ids(self):
        """Invalid IDs should fail validation."""
        assert not is_valid("")
        assert not is_valid("invalid")
        assert not is_valid("obj_INVALID")
        assert not is_valid("obj_")

    def test_no_prefix_returns_none(self):
        assert extract_prefix("01ARZ3NDEKTSV4RRFFQ69G5FAV") is None

