"""
ResourceData - the working view of one job during one lifecycle operation.

Combines three things:
- the declared JobConfiguration (absent for state-only operations such as
  refresh and destroy)
- the prior ResourceState loaded from the state store (absent on first create)
- the identifier and attribute map being built by the current operation

Lifecycle handlers read declared values and write the identifier and
computed attributes here; the caller persists to_state() afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .job_config import FORCE_NEW_FIELDS, JobConfiguration


# Attributes whose recorded value is whatever the last read returned.
COMPUTED_FIELDS = ("tags", "job_state")


@dataclass
class ResourceState:
    """
    Persisted state of one job.

    Attributes:
        id: Remote identifier returned by job creation
        attributes: Declared attributes plus computed values as last read
    """
    id: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def resource_group_name(self) -> str:
        return self.attributes.get("resource_group_name", "")

    @property
    def name(self) -> str:
        return self.attributes.get("name", "")

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "attributes": self.attributes}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceState":
        return cls(id=data["id"], attributes=dict(data.get("attributes", {})))


class ResourceData:
    """
    Declared configuration, prior state and identifier for one job.

    Usage:
        data = ResourceData(config, prior=store.load(address))
        handler.apply(data, client)
        state = data.to_state()   # None once the job is deleted
    """

    def __init__(
        self,
        config: Optional[JobConfiguration] = None,
        prior: Optional[ResourceState] = None,
    ):
        if config is None and prior is None:
            raise ValueError("ResourceData needs a declared configuration, prior state, or both")

        self.config = config
        self.prior = prior
        self._id = prior.id if prior else ""

        if config is not None:
            self._declared = config.to_dict()
            self._attributes = self._declared_attributes()
        else:
            self._declared = {}
            self._attributes = dict(prior.attributes)

    def _declared_attributes(self) -> dict[str, Any]:
        """Declared values, with computed fields taken from prior state only."""
        attributes = {k: v for k, v in self._declared.items() if k not in COMPUTED_FIELDS}
        if self.prior is not None:
            for key in COMPUTED_FIELDS:
                if key in self.prior.attributes:
                    attributes[key] = self.prior.attributes[key]
        return attributes

    # -------------------------------------------------------------------------
    # Identifier
    # -------------------------------------------------------------------------

    @property
    def id(self) -> str:
        """Remote identifier, empty when the job does not exist."""
        return self._id

    def set_id(self, value: str) -> None:
        """Record (or with "" clear) the remote identifier."""
        self._id = value or ""

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def has_change(self, key: str) -> bool:
        """
        Check whether a declared attribute differs from prior state.

        Undeclared computed attributes never count as changed. Without prior
        state there is nothing to compare and the answer is False.
        """
        if self.config is None or self.prior is None:
            return False
        new = self._declared.get(key)
        if key in COMPUTED_FIELDS and new in (None, {}):
            return False
        return new != self.prior.attributes.get(key)

    def force_new_changes(self) -> list[str]:
        """List immutable attributes whose declared value differs from prior state."""
        return [key for key in FORCE_NEW_FIELDS if self.has_change(key)]

    def reset_to_prior(self) -> None:
        """Discard this operation's identifier and attributes in favour of prior state."""
        if self.prior is None:
            self._id = ""
            self._attributes = self._declared_attributes()
            return
        self._id = self.prior.id
        self._attributes = dict(self.prior.attributes)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_state(self) -> Optional[ResourceState]:
        """State to persist, or None when no remote job is tracked."""
        if not self._id:
            return None
        return ResourceState(id=self._id, attributes=dict(self._attributes))
