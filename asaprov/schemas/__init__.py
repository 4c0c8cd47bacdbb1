"""
asaprov.schemas - Declared configuration and working state for a job.

JobConfiguration -> ResourceData -> ResourceState

Lifecycle:
1. JobConfiguration: Validated declared block (name, sku, children, run-state)
2. ResourceData: Declared config + prior state + identifier for one operation
3. ResourceState: What the state store persists between operations

Everything that fails validation raises SchemaError before a remote call
is made.
"""

from .enums import (
    Sku,
    OutOfOrderPolicy,
    JobState,
    InputType,
    SerializationType,
    FunctionType,
)
from .children import (
    SerializationDecl,
    EventHubDecl,
    IotHubDecl,
    BlobDecl,
    SqlDatabaseDecl,
    FunctionDecl,
    InputDecl,
    OutputDecl,
    TransformationDecl,
)
from .job_config import (
    JobConfiguration,
    FORCE_NEW_FIELDS,
    normalize_location,
)
from .resource_data import (
    ResourceData,
    ResourceState,
    COMPUTED_FIELDS,
)

__all__ = [
    # Enums
    "Sku",
    "OutOfOrderPolicy",
    "JobState",
    "InputType",
    "SerializationType",
    "FunctionType",
    # Children
    "SerializationDecl",
    "EventHubDecl",
    "IotHubDecl",
    "BlobDecl",
    "SqlDatabaseDecl",
    "FunctionDecl",
    "InputDecl",
    "OutputDecl",
    "TransformationDecl",
    # Job
    "JobConfiguration",
    "FORCE_NEW_FIELDS",
    "normalize_location",
    # Working state
    "ResourceData",
    "ResourceState",
    "COMPUTED_FIELDS",
]
