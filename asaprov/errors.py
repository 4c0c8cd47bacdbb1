"""
Error classes for asaprov.

Local failures are raised as AsaprovError subclasses:
- SchemaError: Declared configuration violates a schema constraint
- ResourceIdError: Persisted identifier cannot be parsed
- StateError: Local state file is unreadable

Remote failures are NOT wrapped. Any azure.core.exceptions.AzureError raised
by the management SDK propagates to the caller unchanged, with no retry and
no classification. The CLI is the only place both kinds are caught.
"""


class AsaprovError(Exception):
    """Base exception for asaprov."""
    pass


class SchemaError(AsaprovError):
    """
    Declared configuration is invalid.

    Examples:
    - Unsupported SKU
    - Negative out-of-order delay
    - Duplicate child resource names
    - Datasource block missing or ambiguous

    Raised by the schema layer before any remote call is issued.
    """
    pass


class ResourceIdError(AsaprovError):
    """
    Persisted identifier is malformed.

    Raised by Read before the remote API is contacted.
    """

    def __init__(self, resource_id: str, reason: str):
        self.resource_id = resource_id
        self.reason = reason
        super().__init__(f"Cannot parse resource ID {resource_id!r}: {reason}")


class StateError(AsaprovError):
    """Local state could not be read or decoded."""
    pass
