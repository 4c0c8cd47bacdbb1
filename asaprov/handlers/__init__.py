"""
Handlers module for asaprov resources.

Each handler drives one kind of remote resource through create, read,
update and delete. The management client is passed into every call.

Usage:
    from asaprov.handlers import HandlerRegistry

    registry = HandlerRegistry.create_default()
    handler = registry.get("stream_analytics_job")
    handler.apply(data, client)
"""

from asaprov.handlers.base import ResourceHandler, PlanAction
from asaprov.handlers.registry import HandlerRegistry
from asaprov.handlers.stream_job import StreamAnalyticsJobHandler

__all__ = [
    "ResourceHandler",
    "PlanAction",
    "HandlerRegistry",
    "StreamAnalyticsJobHandler",
]
