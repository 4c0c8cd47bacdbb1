"""
Child resource declarations - functions, inputs, outputs, transformation.

Each child is submitted to the job on its own with create-or-replace
semantics and keyed by name. None of them has a local identity of its own;
they live and die with the parent job.

Datasources follow the nested-block convention: an input or output carries
exactly one of `event_hub`, `iot_hub`, `blob` or `sql_database`.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from asaprov.errors import SchemaError

from .enums import FunctionType, InputType, SerializationType, parse_enum
from .fields import (
    compact_dict,
    expect_list,
    expect_mapping,
    optional_int,
    optional_str,
    reject_unknown,
    require_str,
)


SUPPORTED_ENCODINGS = ("UTF8",)
JSON_FORMATS = ("LineSeparated", "Array")
CSV_DELIMITERS = (",", ";", "\t", "|", " ")

# 1 and 3 are fractional units; above that the API wants whole nodes of 6.
MAX_STREAMING_UNITS = 120


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SerializationDecl:
    """
    Event serialization for an input or output.

    Attributes:
        type: Json, Csv or Avro
        encoding: Character encoding (Json/Csv only, UTF8)
        field_delimiter: Column separator (Csv only, required)
        format: LineSeparated or Array (Json only)
    """
    type: SerializationType
    encoding: Optional[str] = None
    field_delimiter: Optional[str] = None
    format: Optional[str] = None

    def __post_init__(self):
        if self.type == SerializationType.AVRO:
            if self.encoding or self.field_delimiter or self.format:
                raise SchemaError("serialization: Avro takes no encoding, field_delimiter or format")
            return

        if self.encoding is not None and self.encoding not in SUPPORTED_ENCODINGS:
            raise SchemaError(f"serialization.encoding: unsupported encoding {self.encoding!r}")

        if self.type == SerializationType.CSV:
            if self.field_delimiter not in CSV_DELIMITERS:
                raise SchemaError(
                    f"serialization.field_delimiter: Csv requires one of "
                    f"{list(CSV_DELIMITERS)}, got {self.field_delimiter!r}"
                )
            if self.format is not None:
                raise SchemaError("serialization.format: only valid for Json")

        if self.type == SerializationType.JSON:
            if self.field_delimiter is not None:
                raise SchemaError("serialization.field_delimiter: only valid for Csv")
            if self.format is not None and self.format not in JSON_FORMATS:
                raise SchemaError(f"serialization.format: expected one of {list(JSON_FORMATS)}")

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "SerializationDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, {"type", "encoding", "field_delimiter", "format"}, context)
        return cls(
            type=parse_enum(SerializationType, require_str(data, "type", context), f"{context}.type"),
            encoding=optional_str(data, "encoding", context),
            field_delimiter=optional_str(data, "field_delimiter", context),
            format=optional_str(data, "format", context),
        )


# -----------------------------------------------------------------------------
# Datasources
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class EventHubDecl:
    """Event Hub datasource (input or output)."""
    service_bus_namespace: str
    event_hub_name: str
    shared_access_policy_name: str
    shared_access_policy_key: str
    consumer_group_name: Optional[str] = None
    partition_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "EventHubDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        return cls(
            service_bus_namespace=require_str(data, "service_bus_namespace", context),
            event_hub_name=require_str(data, "event_hub_name", context),
            shared_access_policy_name=require_str(data, "shared_access_policy_name", context),
            shared_access_policy_key=require_str(data, "shared_access_policy_key", context),
            consumer_group_name=optional_str(data, "consumer_group_name", context),
            partition_key=optional_str(data, "partition_key", context),
        )


@dataclass(frozen=True)
class IotHubDecl:
    """IoT Hub datasource (stream inputs only)."""
    iot_hub_namespace: str
    shared_access_policy_name: str
    shared_access_policy_key: str
    consumer_group_name: Optional[str] = None
    endpoint: str = "messages/events"

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "IotHubDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        return cls(
            iot_hub_namespace=require_str(data, "iot_hub_namespace", context),
            shared_access_policy_name=require_str(data, "shared_access_policy_name", context),
            shared_access_policy_key=require_str(data, "shared_access_policy_key", context),
            consumer_group_name=optional_str(data, "consumer_group_name", context),
            endpoint=optional_str(data, "endpoint", context) or "messages/events",
        )


@dataclass(frozen=True)
class BlobDecl:
    """Blob storage datasource (stream/reference inputs and outputs)."""
    storage_account_name: str
    storage_account_key: str
    container: str
    path_pattern: str = ""
    date_format: Optional[str] = None
    time_format: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "BlobDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        return cls(
            storage_account_name=require_str(data, "storage_account_name", context),
            storage_account_key=require_str(data, "storage_account_key", context),
            container=require_str(data, "container", context),
            path_pattern=optional_str(data, "path_pattern", context) or "",
            date_format=optional_str(data, "date_format", context),
            time_format=optional_str(data, "time_format", context),
        )


@dataclass(frozen=True)
class SqlDatabaseDecl:
    """Azure SQL Database datasource (outputs only)."""
    server: str
    database: str
    user: str
    password: str
    table: str

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "SqlDatabaseDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        return cls(**{name: require_str(data, name, context) for name in cls.__dataclass_fields__})


def _single_datasource(
    data: Mapping[str, Any], kinds: dict[str, type], context: str
) -> dict[str, Any]:
    """Parse the one datasource block present in `data` out of `kinds`."""
    present = [kind for kind in kinds if data.get(kind) is not None]
    if len(present) != 1:
        raise SchemaError(
            f"{context}: exactly one datasource block of "
            f"[{', '.join(kinds)}] is required, got {present or 'none'}"
        )
    kind = present[0]
    return {kind: kinds[kind].from_dict(data[kind], f"{context}.{kind}")}


# -----------------------------------------------------------------------------
# Child declarations
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionDecl:
    """
    A JavaScript user-defined scalar function.

    Attributes:
        name: Function name, unique within the job
        script: JavaScript source of the function
        inputs: Declared data types of the parameters, in order
        output: Declared data type of the return value
        type: Binding type (only javascript)
    """
    name: str
    script: str
    inputs: tuple[str, ...]
    output: str
    type: FunctionType = FunctionType.JAVASCRIPT

    def __post_init__(self):
        if not self.inputs:
            raise SchemaError(f"function '{self.name}': at least one input data type is required")

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "FunctionDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, {"name", "type", "script", "inputs", "output"}, context)
        inputs = expect_list(data.get("inputs"), f"{context}.inputs")
        for i, data_type in enumerate(inputs):
            if not isinstance(data_type, str) or not data_type:
                raise SchemaError(f"{context}.inputs[{i}]: expected a data type string")
        return cls(
            name=require_str(data, "name", context),
            script=require_str(data, "script", context),
            inputs=tuple(inputs),
            output=require_str(data, "output", context),
            type=parse_enum(FunctionType, data.get("type", "javascript"), f"{context}.type"),
        )

    def to_dict(self) -> dict[str, Any]:
        return compact_dict(self)


@dataclass(frozen=True)
class InputDecl:
    """
    A job input.

    Stream inputs read from event_hub, iot_hub or blob; reference inputs
    read from blob only.
    """
    name: str
    type: InputType
    serialization: SerializationDecl
    event_hub: Optional[EventHubDecl] = None
    iot_hub: Optional[IotHubDecl] = None
    blob: Optional[BlobDecl] = None

    def __post_init__(self):
        if self.type == InputType.REFERENCE and self.blob is None:
            raise SchemaError(f"job_input '{self.name}': Reference inputs only support a blob datasource")

    @property
    def datasource(self) -> EventHubDecl | IotHubDecl | BlobDecl:
        return self.event_hub or self.iot_hub or self.blob

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "InputDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        datasource = _single_datasource(
            data, {"event_hub": EventHubDecl, "iot_hub": IotHubDecl, "blob": BlobDecl}, context
        )
        if data.get("serialization") is None:
            raise SchemaError(f"{context}: missing required block 'serialization'")
        return cls(
            name=require_str(data, "name", context),
            type=parse_enum(InputType, data.get("type", "Stream"), f"{context}.type"),
            serialization=SerializationDecl.from_dict(data["serialization"], f"{context}.serialization"),
            **datasource,
        )

    def to_dict(self) -> dict[str, Any]:
        return compact_dict(self)


@dataclass(frozen=True)
class OutputDecl:
    """
    A job output.

    Serialization is required for event_hub and blob sinks and must be
    absent for sql_database, which writes rows directly.
    """
    name: str
    serialization: Optional[SerializationDecl] = None
    event_hub: Optional[EventHubDecl] = None
    blob: Optional[BlobDecl] = None
    sql_database: Optional[SqlDatabaseDecl] = None

    def __post_init__(self):
        if self.sql_database is not None and self.serialization is not None:
            raise SchemaError(f"job_output '{self.name}': sql_database outputs take no serialization")
        if self.sql_database is None and self.serialization is None:
            raise SchemaError(f"job_output '{self.name}': missing required block 'serialization'")

    @property
    def datasource(self) -> EventHubDecl | BlobDecl | SqlDatabaseDecl:
        return self.event_hub or self.blob or self.sql_database

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "OutputDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, set(cls.__dataclass_fields__), context)
        datasource = _single_datasource(
            data, {"event_hub": EventHubDecl, "blob": BlobDecl, "sql_database": SqlDatabaseDecl}, context
        )
        serialization = None
        if data.get("serialization") is not None:
            serialization = SerializationDecl.from_dict(data["serialization"], f"{context}.serialization")
        return cls(
            name=require_str(data, "name", context),
            serialization=serialization,
            **datasource,
        )

    def to_dict(self) -> dict[str, Any]:
        return compact_dict(self)


@dataclass(frozen=True)
class TransformationDecl:
    """The job's query and the streaming units it runs with."""
    name: str
    query: str
    streaming_units: int = 3

    def __post_init__(self):
        units = self.streaming_units
        if not (units in (1, 3) or (units % 6 == 0 and 6 <= units <= MAX_STREAMING_UNITS)):
            raise SchemaError(
                f"transformation '{self.name}': streaming_units must be 1, 3 or a "
                f"multiple of 6 up to {MAX_STREAMING_UNITS}, got {units}"
            )

    @classmethod
    def from_dict(cls, data: Any, context: str) -> "TransformationDecl":
        data = expect_mapping(data, context)
        reject_unknown(data, {"name", "query", "streaming_units"}, context)
        units = optional_int(data, "streaming_units", context)
        return cls(
            name=require_str(data, "name", context),
            query=require_str(data, "query", context),
            streaming_units=3 if units is None else units,
        )

    def to_dict(self) -> dict[str, Any]:
        return compact_dict(self)
