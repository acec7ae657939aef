"""Tests for EventBus and invoicing events."""

import logging
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from core.event_bus import EventBus
from core.events import InvoiceCompleted, InvoiceCreated, InvoiceEvent, NoteCreated
from core.models import Company, Invoice


@pytest.fixture
def _invoice():
    return Invoice.create(
        company=Company(name="A", tip_percentage=Decimal("10")).snapshot(),
        number="INV-20260101-000001",
    )


class TestEvents:

    def test_create_populates_identity(self, _invoice):
        event = InvoiceCreated.create(invoice=_invoice)

        assert event.invoice is _invoice
        assert event.event_id
        assert event.occurred_at.tzinfo is not None

    def test_events_are_immutable(self, _invoice):
        event = InvoiceCreated.create(invoice=_invoice)
        with pytest.raises(FrozenInstanceError):
            event.invoice = None

    def test_event_ids_unique(self, _invoice):
        assert InvoiceCreated.create(_invoice).event_id != InvoiceCreated.create(_invoice).event_id


class TestSubscribeAndPublish:

    def test_single_handler_receives_the_exact_event_object(self, _invoice):
        bus = EventBus()
        received = []
        bus.subscribe("InvoiceCreated", received.append)

        event = InvoiceCreated.create(invoice=_invoice)
        bus.publish(event)

        assert received == [event]

    def test_subscribe_by_class(self, _invoice):
        bus = EventBus()
        received = []
        bus.subscribe(InvoiceCompleted, received.append)

        bus.publish(InvoiceCreated.create(invoice=_invoice))
        bus.publish(InvoiceCompleted.create(invoice=_invoice))

        assert [type(e) for e in received] == [InvoiceCompleted]

    def test_base_class_subscriber_receives_subclasses(self, _invoice):
        bus = EventBus()
        received = []
        bus.subscribe(InvoiceEvent, received.append)

        bus.publish(InvoiceCreated.create(invoice=_invoice))
        bus.publish(NoteCreated.create(note=None))

        assert [type(e) for e in received] == [InvoiceCreated]

    def test_specific_subscribers_run_first(self, _invoice):
        bus = EventBus()
        order = []
        bus.subscribe("InvoicingEvent", lambda e: order.append("base"))
        bus.subscribe("InvoiceCreated", lambda e: order.append("specific"))

        bus.publish(InvoiceCreated.create(invoice=_invoice))

        assert order == ["specific", "base"]

    def test_no_subscribers_is_noop(self, _invoice):
        EventBus().publish(InvoiceCreated.create(invoice=_invoice))


class TestHandlerFailures:

    def test_failing_handler_does_not_stop_others(self, _invoice, caplog):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe("InvoiceCreated", broken)
        bus.subscribe("InvoiceCreated", received.append)

        with caplog.at_level(logging.ERROR, logger="core.event_bus"):
            bus.publish(InvoiceCreated.create(invoice=_invoice))

        assert len(received) == 1
        assert "broken" in caplog.text
