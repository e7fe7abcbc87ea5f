"""Tests for the client message codec."""

import pytest

from uisync.core import DecodeError, IllegalPropertyError, ValidationError
from uisync.serial import ClientUpdateBatch, ComponentAction, PropertyUpdate


@pytest.mark.unit
def test_parse_client_message(serializer):
    """Updates are grouped per component; events become actions."""
    batch = serializer.load_client_message(
        '<client-message trans-id="5">'
        '<c i="c_3"><p n="text">hello</p><p n="selection" x="1" t="i">4</p></c>'
        '<e i="c_4" t="action"/>'
        "</client-message>"
    )

    assert batch.transaction_id == 5
    assert batch.updates == (
        PropertyUpdate(client_render_id="c_3", name="text", value="hello"),
        PropertyUpdate(client_render_id="c_3", name="selection", value=4, index=1),
    )
    assert batch.actions == (ComponentAction(client_render_id="c_4", event_type="action"),)


@pytest.mark.unit
def test_missing_transaction_id(serializer):
    with pytest.raises(DecodeError):
        serializer.load_client_message("<client-message/>")


@pytest.mark.unit
@pytest.mark.parametrize("value", ["five", "-1"])
def test_invalid_transaction_id(serializer, value):
    with pytest.raises(ValidationError):
        serializer.load_client_message(f'<client-message trans-id="{value}"/>')


@pytest.mark.unit
def test_client_cannot_invoke_methods(serializer):
    """Method-style elements are not accepted from clients."""
    with pytest.raises(IllegalPropertyError):
        serializer.load_client_message(
            '<client-message trans-id="1"><c i="c_5"><p m="select">a</p></c></client-message>'
        )


@pytest.mark.unit
def test_wrong_root(serializer):
    with pytest.raises(DecodeError):
        serializer.load_client_message('<c t="Label"/>')


@pytest.mark.unit
def test_store_client_message(serializer):
    """A stored batch decodes to an equal batch."""
    batch = ClientUpdateBatch(
        transaction_id=7,
        updates=(
            PropertyUpdate(client_render_id="c_3", name="text", value="typed"),
            PropertyUpdate(client_render_id="c_5", name="selection", value=True, index=0),
        ),
        actions=(ComponentAction(client_render_id="c_4", event_type="action"),),
    )

    element = serializer.store_client_message(batch)

    assert element.get("trans-id") == "7"
    assert serializer.load_client_message(element) == batch
