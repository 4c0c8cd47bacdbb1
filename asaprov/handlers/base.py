"""
Base resource handler and the apply/plan decision shared by all resources.

Handlers are responsible for driving one remote resource through its
lifecycle. Each handler implements create, read, update and delete against
a ResourceData; the ArmClient is passed in on every call rather than held
by the handler.
"""

from abc import ABC, abstractmethod
from enum import Enum
import logging

from asaprov.client import ArmClient
from asaprov.schemas import ResourceData


logger = logging.getLogger(__name__)


class PlanAction(str, Enum):
    """What apply() will do for a given ResourceData."""
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"


class ResourceHandler(ABC):
    """
    Abstract base class for resource lifecycle handlers.

    Subclasses implement the four lifecycle operations. Every operation
    fails fast: the first error propagates and nothing is rolled back.
    """

    resource_type: str = ""

    @abstractmethod
    def create(self, data: ResourceData, client: ArmClient) -> None:
        """
        Create the remote resource from data.config.

        Must record the identifier on data as soon as the remote system
        returns one, so a later delete can reach a partially built resource.
        """
        pass

    @abstractmethod
    def read(self, data: ResourceData, client: ArmClient) -> None:
        """Refresh computed attributes on data from the remote resource."""
        pass

    @abstractmethod
    def update(self, data: ResourceData, client: ArmClient) -> None:
        """Apply data.config to the existing remote resource."""
        pass

    @abstractmethod
    def delete(self, data: ResourceData, client: ArmClient) -> None:
        """Delete the remote resource and clear the identifier on success."""
        pass

    def plan(self, data: ResourceData) -> PlanAction:
        """
        Decide which lifecycle path apply() takes, without remote calls.

        Returns:
            CREATE when no identifier is tracked, REPLACE when an immutable
            attribute changed, UPDATE otherwise
        """
        if not data.id:
            return PlanAction.CREATE
        if data.force_new_changes():
            return PlanAction.REPLACE
        return PlanAction.UPDATE

    def apply(self, data: ResourceData, client: ArmClient) -> PlanAction:
        """
        Converge the remote resource to data.config.

        Replacement deletes the resource recorded in prior state first, then
        creates the declared one from scratch.

        Returns:
            The action that was taken
        """
        if data.config is None:
            raise ValueError("apply requires a declared configuration")

        action = self.plan(data)
        if action == PlanAction.CREATE:
            self.create(data, client)
        elif action == PlanAction.REPLACE:
            logger.info(
                "Replacing %s: immutable attribute(s) changed: %s",
                self.resource_type, ", ".join(data.force_new_changes()),
            )
            previous = ResourceData(prior=data.prior)
            try:
                self.delete(previous, client)
            except Exception:
                # The old resource still exists; keep tracking it as it was.
                data.reset_to_prior()
                raise
            data.set_id("")
            self.create(data, client)
        else:
            self.update(data, client)
        return action
