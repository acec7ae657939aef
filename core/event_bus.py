"""
Event bus for invoicing domain events.

Synchronous in-process pub/sub. Handlers execute immediately in the same
thread as the publisher. Handler errors are logged but never propagate:
the primary operation (repository write + audit) has already happened.

The services publish InvoiceCreated, InvoiceCompleted, InvoiceDeleted and
NoteCreated but register no listeners of their own. Integrations such as
receipt mailers subscribe on the bus passed to build_services.
"""

import logging
from typing import Callable, Dict, List

from core.events import InvoicingEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class or class name. A subscriber to a base class
    (e.g. 'InvoiceEvent') receives every subclass event too.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: type | str, callback: Callable) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Event class, or its name (e.g. 'InvoiceCompleted')
            callback: Function to call with the event
        """
        name = event_type if isinstance(event_type, str) else event_type.__name__
        self._subscribers.setdefault(name, []).append(callback)

    def publish(self, event: InvoicingEvent) -> None:
        """
        Publish an event to subscribers of its class and of its base classes.

        Most specific subscribers run first, each group in subscription order.
        """
        for cls in type(event).__mro__:
            for callback in self._subscribers.get(cls.__name__, []):
                try:
                    callback(event)
                except Exception:
                    logger.exception(
                        "Handler %s failed for %s (event_id=%s)",
                        getattr(callback, "__name__", repr(callback)),
                        type(event).__name__,
                        event.event_id,
                    )
