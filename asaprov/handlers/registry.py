"""
Handler Registry for dispatching declared blocks to resource handlers.

The registry maps resource types (the top-level keys of a declaration
file, e.g. stream_analytics_job) to their ResourceHandler, so the CLI can
drive any declared resource without knowing its handler class.
"""

from asaprov.handlers.base import ResourceHandler


class HandlerRegistry:
    """
    Registry for handler dispatch by resource type.

    Usage:
        registry = HandlerRegistry()
        registry.register(StreamAnalyticsJobHandler())

        handler = registry.get("stream_analytics_job")

        # Or use factory with defaults
        registry = HandlerRegistry.create_default()
    """

    def __init__(self) -> None:
        """Initialize an empty handler registry."""
        self._handlers: dict[str, ResourceHandler] = {}

    def register(self, handler: ResourceHandler, resource_type: str | None = None) -> None:
        """
        Register a handler.

        Args:
            handler: Handler instance
            resource_type: Type name; defaults to handler.resource_type
        """
        key = resource_type or handler.resource_type
        if not key:
            raise ValueError(f"{type(handler).__name__} has no resource_type")
        self._handlers[key] = handler

    def get(self, resource_type: str) -> ResourceHandler:
        """
        Get the handler for a resource type.

        Raises:
            KeyError: If no handler is registered for this type
        """
        if resource_type not in self._handlers:
            registered = list(self._handlers.keys())
            raise KeyError(
                f"No handler registered for resource type: {resource_type}. "
                f"Registered: {registered}"
            )
        return self._handlers[resource_type]

    def has(self, resource_type: str) -> bool:
        return resource_type in self._handlers

    def list_types(self) -> list[str]:
        return list(self._handlers.keys())

    @classmethod
    def create_default(cls) -> "HandlerRegistry":
        """Create a registry with every built-in handler registered."""
        from asaprov.handlers.stream_job import StreamAnalyticsJobHandler

        registry = cls()
        registry.register(StreamAnalyticsJobHandler())
        return registry
