"""
Client message codec.

A client message carries the transaction id the client last observed,
property updates per component and user actions::

    <client-message trans-id="5">
      <c i="c_12"><p n="text">hello</p></c>
      <e i="c_14" t="action"/>
    </client-message>
"""

from typing import Any
from xml.etree.ElementTree import Element, SubElement

from pydantic import ConfigDict, Field

from ..core.errors import DecodeError, IllegalPropertyError
from ..core.validate import RequestValidator, ValidationError
from .loader import COMPONENT_TAG, EVENT_TAG, PROPERTY_TAG, PropertyLoader
from .writer import PropertyWriter

CLIENT_MESSAGE_TAG = "client-message"
TRANSACTION_ATTRIBUTE = "trans-id"


class ClientModel(RequestValidator):
    """Strict, immutable model that may hold arbitrary decoded values."""

    model_config = ConfigDict(
        strict=True, extra="forbid", frozen=True, arbitrary_types_allowed=True
    )


class PropertyUpdate(ClientModel):
    """A client-side change to one component property."""

    client_render_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    value: Any = None
    index: int | None = Field(default=None, ge=0)


class ComponentAction(ClientModel):
    """A user action on a component, e.g. a button press."""

    client_render_id: str = Field(min_length=1)
    event_type: str = Field(min_length=1)


class ClientUpdateBatch(ClientModel):
    """Everything one client exchange asks the server to apply."""

    transaction_id: int = Field(ge=0)
    updates: tuple[PropertyUpdate, ...] = ()
    actions: tuple[ComponentAction, ...] = ()


def _required(element: Element, attribute: str) -> str:
    value = element.get(attribute)
    if not value:
        raise DecodeError(f"<{element.tag}> missing required attribute {attribute!r}")
    return value


def parse_client_message(loader: PropertyLoader, element: Element) -> ClientUpdateBatch:
    """
    Decode a client message into a validated batch.

    Client property elements must be named; method-style elements are
    rejected because a client may only write values.

    Raises:
        DecodeError: If the message is malformed
    """
    if element.tag != CLIENT_MESSAGE_TAG:
        raise DecodeError(f"Element is not a client message: <{element.tag}>")

    transaction_text = _required(element, TRANSACTION_ATTRIBUTE)
    try:
        transaction_id = int(transaction_text)
    except ValueError as e:
        raise ValidationError(f"Invalid transaction id: {transaction_text!r}") from e
    if transaction_id < 0:
        raise ValidationError(f"Invalid transaction id: {transaction_text!r}")

    updates: list[PropertyUpdate] = []
    actions: list[ComponentAction] = []

    for child in element:
        if child.tag == COMPONENT_TAG:
            client_render_id = _required(child, "i")
            for property_element in child:
                if property_element.tag != PROPERTY_TAG:
                    continue
                name = property_element.get("n")
                if not name:
                    raise IllegalPropertyError("Client property updates must be named")
                updates.append(
                    PropertyUpdate(
                        client_render_id=client_render_id,
                        name=name,
                        value=loader.decode_value(property_element),
                        index=loader.parse_index(property_element),
                    )
                )
        elif child.tag == EVENT_TAG:
            actions.append(
                ComponentAction(
                    client_render_id=_required(child, "i"),
                    event_type=_required(child, "t"),
                )
            )

    return ClientUpdateBatch(
        transaction_id=transaction_id, updates=tuple(updates), actions=tuple(actions)
    )


def store_client_message(writer: PropertyWriter, batch: ClientUpdateBatch) -> Element:
    """Encode a batch as a client message (used by test clients and tooling)."""
    element = Element(CLIENT_MESSAGE_TAG)
    element.set(TRANSACTION_ATTRIBUTE, str(batch.transaction_id))

    by_component: dict[str, Element] = {}
    for update in batch.updates:
        component_element = by_component.get(update.client_render_id)
        if component_element is None:
            component_element = SubElement(element, COMPONENT_TAG, i=update.client_render_id)
            by_component[update.client_render_id] = component_element
        property_element = SubElement(component_element, PROPERTY_TAG, n=update.name)
        if update.index is not None:
            property_element.set("x", str(update.index))
        if not writer.store_property(property_element, update.value):
            component_element.remove(property_element)

    for action in batch.actions:
        SubElement(element, EVENT_TAG, i=action.client_render_id, t=action.event_type)

    return element


__all__ = [
    "CLIENT_MESSAGE_TAG",
    "PropertyUpdate",
    "ComponentAction",
    "ClientUpdateBatch",
    "parse_client_message",
    "store_client_message",
]
