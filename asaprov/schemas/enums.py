"""
Enumerations for declared Stream Analytics attributes.

Values match the strings the management API expects, so members can be
passed straight into SDK models.
"""

from enum import Enum

from asaprov.errors import SchemaError


class Sku(str, Enum):
    """Job pricing tier. The API accepts a single value."""
    STANDARD = "Standard"


class OutOfOrderPolicy(str, Enum):
    """How the job treats events that arrive out of order."""
    ADJUST = "Adjust"
    DROP = "Drop"


class JobState(str, Enum):
    """
    Run-states a job can be driven to.

    The remote system reports more states than these (Created, Starting,
    Stopping, Idle, Degraded, Failed, ...). Only the two below can be
    declared; whatever the API reports is stored as-is on read.
    """
    RUNNING = "Running"
    STOPPED = "Stopped"


class InputType(str, Enum):
    """Kind of job input."""
    STREAM = "Stream"
    REFERENCE = "Reference"


class SerializationType(str, Enum):
    """Wire format of input/output events."""
    JSON = "Json"
    CSV = "Csv"
    AVRO = "Avro"


class FunctionType(str, Enum):
    """Function bindings supported for user-defined functions."""
    JAVASCRIPT = "javascript"


def parse_enum(enum_cls: type[Enum], value: str, field_name: str) -> Enum:
    """
    Parse a declared string into an enum member.

    Matching is case-sensitive, mirroring the API.

    Raises:
        SchemaError: If value is not an allowed member
    """
    for member in enum_cls:
        if member.value == value:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise SchemaError(f"{field_name}: expected one of [{allowed}], got {value!r}")
