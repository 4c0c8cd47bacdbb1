"""
StateStore - Persist the identifier and attributes of provisioned resources.

Each declared resource has an address, "<resource_type>.<label>" (for
example stream_analytics_job.clickstream). The store maps addresses to
ResourceState.

Storage backends:
- In-memory (for testing)
- File-based: one JSON document per address
"""

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from asaprov.errors import SchemaError, StateError
from asaprov.schemas import ResourceState
from asaprov.utils import ensure_directory_permissions


logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^[a-z_]+\.[A-Za-z0-9_-]+$")


def make_address(resource_type: str, label: str) -> str:
    """
    Build and validate a resource address.

    Raises:
        SchemaError: If the address contains characters unsafe for a filename
    """
    return check_address(f"{resource_type}.{label}")


def check_address(address: str) -> str:
    """Return address unchanged, or raise SchemaError if it is not a valid address."""
    if not ADDRESS_PATTERN.match(address):
        raise SchemaError(
            f"Invalid resource address {address!r}: labels may only contain "
            "letters, digits, '_' and '-'"
        )
    return address


class StateStore(ABC):
    """
    Abstract base class for resource state storage.
    """

    @abstractmethod
    def load(self, address: str) -> Optional[ResourceState]:
        """
        Load state for an address.

        Returns:
            The ResourceState if tracked, None otherwise
        """
        pass

    @abstractmethod
    def save(self, address: str, state: ResourceState) -> None:
        """Create or overwrite the state for an address."""
        pass

    @abstractmethod
    def delete(self, address: str) -> None:
        """Forget an address. Missing addresses are ignored."""
        pass

    @abstractmethod
    def list_addresses(self) -> list[str]:
        """List tracked addresses, sorted."""
        pass

    def persist(self, address: str, state: Optional[ResourceState]) -> None:
        """Save state, or delete the address when state is None."""
        if state is None:
            self.delete(address)
        else:
            self.save(address, state)


class InMemoryStateStore(StateStore):
    """
    In-memory implementation of StateStore for testing.

    All data is lost when the instance is garbage collected.
    """

    def __init__(self):
        self._states: dict[str, ResourceState] = {}

    def load(self, address: str) -> Optional[ResourceState]:
        state = self._states.get(address)
        if state is None:
            return None
        return ResourceState.from_dict(state.to_dict())

    def save(self, address: str, state: ResourceState) -> None:
        self._states[address] = ResourceState.from_dict(state.to_dict())

    def delete(self, address: str) -> None:
        self._states.pop(address, None)

    def list_addresses(self) -> list[str]:
        return sorted(self._states)

    def clear(self) -> None:
        """Clear all stored data (for testing)."""
        self._states.clear()


class FileStateStore(StateStore):
    """
    File-based implementation of StateStore.

    Stores one JSON document per address:
        state_dir/
            stream_analytics_job.clickstream.json
            stream_analytics_job.telemetry.json

    The directory is created owner-only because state holds datasource
    credentials.
    """

    def __init__(self, state_dir: Path | str):
        self._state_dir = Path(state_dir)
        ensure_directory_permissions(self._state_dir)

    def _path(self, address: str) -> Path:
        check_address(address)
        return self._state_dir / f"{address}.json"

    def load(self, address: str) -> Optional[ResourceState]:
        path = self._path(address)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                data = json.load(f)
            return ResourceState.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise StateError(f"Corrupt state file {path}: {e}") from e

    def save(self, address: str, state: ResourceState) -> None:
        path = self._path(address)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(state.to_dict(), f, indent=2, sort_keys=True)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
        logger.debug("Saved state for %s to %s", address, path)

    def delete(self, address: str) -> None:
        path = self._path(address)
        if path.exists():
            path.unlink()
            logger.debug("Removed state for %s", address)

    def list_addresses(self) -> list[str]:
        return sorted(p.name[: -len(".json")] for p in self._state_dir.glob("*.json"))
