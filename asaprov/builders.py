"""
Translate declared blocks into azure-mgmt-streamanalytics models.

Pure functions, no I/O. The lifecycle handler calls these right before each
submission so every create and update sends the full declared body.
"""

from typing import Optional

from azure.mgmt.streamanalytics import models as sa

from asaprov.schemas import (
    BlobDecl,
    EventHubDecl,
    FunctionDecl,
    InputDecl,
    InputType,
    IotHubDecl,
    JobConfiguration,
    OutputDecl,
    SerializationDecl,
    SerializationType,
    SqlDatabaseDecl,
    TransformationDecl,
)
from asaprov.tags import expand_tags


def expand_streaming_job(config: JobConfiguration) -> sa.StreamingJob:
    """
    Build the job descriptor.

    Location and SKU are always sent; the job name is read-only on the
    model and travels in the request path. The out-of-order settings and
    tags are only sent when declared, so the API applies its own defaults.
    """
    job = sa.StreamingJob(
        location=config.location,
        sku=sa.Sku(name=config.sku.value),
    )
    if config.events_out_of_order_max_delay_in_seconds is not None:
        job.events_out_of_order_max_delay_in_seconds = config.events_out_of_order_max_delay_in_seconds
    if config.events_out_of_order_policy is not None:
        job.events_out_of_order_policy = config.events_out_of_order_policy.value
    if config.tags:
        job.tags = expand_tags(config.tags)
    return job


def expand_serialization(decl: Optional[SerializationDecl]) -> Optional[sa.Serialization]:
    if decl is None:
        return None
    if decl.type == SerializationType.JSON:
        return sa.JsonSerialization(encoding=decl.encoding or "UTF8", format=decl.format)
    if decl.type == SerializationType.CSV:
        return sa.CsvSerialization(field_delimiter=decl.field_delimiter, encoding=decl.encoding or "UTF8")
    return sa.AvroSerialization()


def _storage_accounts(blob: BlobDecl) -> list[sa.StorageAccount]:
    return [sa.StorageAccount(account_name=blob.storage_account_name, account_key=blob.storage_account_key)]


def _expand_input_datasource(decl: InputDecl):
    source = decl.datasource
    if decl.type == InputType.REFERENCE:
        return sa.BlobReferenceInputDataSource(
            storage_accounts=_storage_accounts(source),
            container=source.container,
            path_pattern=source.path_pattern,
            date_format=source.date_format,
            time_format=source.time_format,
        )
    if isinstance(source, EventHubDecl):
        return sa.EventHubStreamInputDataSource(
            service_bus_namespace=source.service_bus_namespace,
            shared_access_policy_name=source.shared_access_policy_name,
            shared_access_policy_key=source.shared_access_policy_key,
            event_hub_name=source.event_hub_name,
            consumer_group_name=source.consumer_group_name,
        )
    if isinstance(source, IotHubDecl):
        return sa.IoTHubStreamInputDataSource(
            iot_hub_namespace=source.iot_hub_namespace,
            shared_access_policy_name=source.shared_access_policy_name,
            shared_access_policy_key=source.shared_access_policy_key,
            consumer_group_name=source.consumer_group_name,
            endpoint=source.endpoint,
        )
    return sa.BlobStreamInputDataSource(
        storage_accounts=_storage_accounts(source),
        container=source.container,
        path_pattern=source.path_pattern,
        date_format=source.date_format,
        time_format=source.time_format,
    )


def expand_input(decl: InputDecl) -> sa.Input:
    datasource = _expand_input_datasource(decl)
    serialization = expand_serialization(decl.serialization)
    if decl.type == InputType.REFERENCE:
        properties = sa.ReferenceInputProperties(serialization=serialization, datasource=datasource)
    else:
        properties = sa.StreamInputProperties(serialization=serialization, datasource=datasource)
    return sa.Input(name=decl.name, properties=properties)


def expand_output(decl: OutputDecl) -> sa.Output:
    sink = decl.datasource
    if isinstance(sink, EventHubDecl):
        datasource = sa.EventHubOutputDataSource(
            service_bus_namespace=sink.service_bus_namespace,
            shared_access_policy_name=sink.shared_access_policy_name,
            shared_access_policy_key=sink.shared_access_policy_key,
            event_hub_name=sink.event_hub_name,
            partition_key=sink.partition_key,
        )
    elif isinstance(sink, SqlDatabaseDecl):
        datasource = sa.AzureSqlDatabaseOutputDataSource(
            server=sink.server,
            database=sink.database,
            user=sink.user,
            password=sink.password,
            table=sink.table,
        )
    else:
        datasource = sa.BlobOutputDataSource(
            storage_accounts=_storage_accounts(sink),
            container=sink.container,
            path_pattern=sink.path_pattern,
            date_format=sink.date_format,
            time_format=sink.time_format,
        )
    return sa.Output(
        name=decl.name,
        datasource=datasource,
        serialization=expand_serialization(decl.serialization),
    )


def expand_function(decl: FunctionDecl) -> sa.Function:
    properties = sa.ScalarFunctionProperties(
        inputs=[sa.FunctionInput(data_type=data_type) for data_type in decl.inputs],
        output=sa.FunctionOutput(data_type=decl.output),
        binding=sa.JavaScriptFunctionBinding(script=decl.script),
    )
    return sa.Function(name=decl.name, properties=properties)


def expand_transformation(decl: TransformationDecl) -> sa.Transformation:
    return sa.Transformation(
        name=decl.name,
        streaming_units=decl.streaming_units,
        query=decl.query,
    )
