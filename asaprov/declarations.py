"""
Load declaration files.

A declaration file is YAML keyed by resource type, then by label:

    stream_analytics_job:
      clickstream:
        name: clickstream-job
        resource_group_name: analytics-rg
        location: westus
        sku: Standard
        job_input:
          - name: clicks
            ...

Each (type, label) pair becomes one Declaration whose address is the key
under which its state is stored.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from asaprov.errors import SchemaError
from asaprov.schemas import JobConfiguration
from asaprov.state_store import make_address


# Resource type -> schema that validates its blocks
DECLARATION_SCHEMAS: dict[str, Any] = {
    "stream_analytics_job": JobConfiguration,
}


@dataclass(frozen=True)
class Declaration:
    """One declared resource."""
    resource_type: str
    label: str
    config: JobConfiguration

    @property
    def address(self) -> str:
        return make_address(self.resource_type, self.label)


def parse_declarations(raw: Any) -> list[Declaration]:
    """
    Validate a parsed declaration document.

    Raises:
        SchemaError: On unknown resource types, bad labels, or invalid blocks
    """
    if not raw:
        return []
    if not isinstance(raw, dict):
        raise SchemaError("Declaration file must contain a mapping of resource types")

    declarations = []
    for resource_type, blocks in raw.items():
        schema = DECLARATION_SCHEMAS.get(resource_type)
        if schema is None:
            raise SchemaError(
                f"Unknown resource type {resource_type!r}. "
                f"Supported: {sorted(DECLARATION_SCHEMAS)}"
            )
        if not isinstance(blocks, dict):
            raise SchemaError(f"{resource_type}: expected a mapping of label -> block")

        for label, block in blocks.items():
            make_address(resource_type, str(label))
            try:
                config = schema.from_dict(block)
            except SchemaError as e:
                raise SchemaError(f"{resource_type}.{label}: {e}") from e
            declarations.append(Declaration(resource_type=resource_type, label=str(label), config=config))

    return declarations


def load_declarations(path: Path) -> list[Declaration]:
    """
    Load and validate a YAML declaration file.

    Raises:
        FileNotFoundError: If the file does not exist
        SchemaError: If the YAML is invalid or a block fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Declaration file not found: {path}")
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML syntax in {path}: {e}")
    return parse_declarations(raw)
