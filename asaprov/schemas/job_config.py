"""
JobConfiguration schema - the declared Stream Analytics job block.

A JobConfiguration is what the user writes: identity (name, resource group),
placement, out-of-order event policy, desired run-state and the child
resources to attach. It is validated once, on load, and the lifecycle
handler treats every constraint checked here as a precondition.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from asaprov.errors import SchemaError
from asaprov.tags import validate_tags

from .children import FunctionDecl, InputDecl, OutputDecl, TransformationDecl
from .enums import JobState, OutOfOrderPolicy, Sku, parse_enum
from .fields import expect_list, expect_mapping, optional_int, optional_str, reject_unknown, require_str


# Changing any of these cannot be done in place; the job must be replaced.
FORCE_NEW_FIELDS = ("name", "resource_group_name")

JOB_FIELDS = {
    "name",
    "sku",
    "resource_group_name",
    "location",
    "tags",
    "events_out_of_order_max_delay_in_seconds",
    "events_out_of_order_policy",
    "job_state",
    "transformation",
    "job_input",
    "job_output",
    "function",
}


def normalize_location(location: str) -> str:
    """Normalize an Azure location ("West US" -> "westus")."""
    return location.replace(" ", "").lower()


@dataclass(frozen=True)
class JobConfiguration:
    """
    A declared Stream Analytics job.

    Attributes:
        name: Job name (immutable identity)
        sku: Pricing tier
        resource_group_name: Owning resource group (immutable identity)
        location: Normalized Azure location
        tags: Free-form tags
        events_out_of_order_max_delay_in_seconds: Tolerance window, >= 0
        events_out_of_order_policy: Adjust or Drop
        job_state: Desired run-state, None leaves the job as created
        functions: Functions, submitted first
        inputs: Inputs, submitted second
        outputs: Outputs, submitted third
        transformation: At most one transformation, submitted last
    """
    name: str
    resource_group_name: str
    location: str
    sku: Sku = Sku.STANDARD
    tags: dict[str, str] = field(default_factory=dict)
    events_out_of_order_max_delay_in_seconds: Optional[int] = None
    events_out_of_order_policy: Optional[OutOfOrderPolicy] = None
    job_state: Optional[JobState] = None
    functions: tuple[FunctionDecl, ...] = field(default_factory=tuple)
    inputs: tuple[InputDecl, ...] = field(default_factory=tuple)
    outputs: tuple[OutputDecl, ...] = field(default_factory=tuple)
    transformation: Optional[TransformationDecl] = None

    def __post_init__(self):
        delay = self.events_out_of_order_max_delay_in_seconds
        if delay is not None and delay < 0:
            raise SchemaError(
                f"events_out_of_order_max_delay_in_seconds: expected >= 0, got {delay}"
            )

        validate_tags(self.tags)

        for label, children in (
            ("function", self.functions),
            ("job_input", self.inputs),
            ("job_output", self.outputs),
        ):
            names = [c.name for c in children]
            if len(names) != len(set(names)):
                duplicates = sorted({n for n in names if names.count(n) > 1})
                raise SchemaError(f"{label}: duplicate names {duplicates}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the declared attribute layout (inverse of from_dict)."""
        data: dict[str, Any] = {
            "name": self.name,
            "sku": self.sku.value,
            "resource_group_name": self.resource_group_name,
            "location": self.location,
            "tags": dict(self.tags),
        }
        if self.events_out_of_order_max_delay_in_seconds is not None:
            data["events_out_of_order_max_delay_in_seconds"] = self.events_out_of_order_max_delay_in_seconds
        if self.events_out_of_order_policy is not None:
            data["events_out_of_order_policy"] = self.events_out_of_order_policy.value
        if self.job_state is not None:
            data["job_state"] = self.job_state.value
        data["function"] = [f.to_dict() for f in self.functions]
        data["job_input"] = [i.to_dict() for i in self.inputs]
        data["job_output"] = [o.to_dict() for o in self.outputs]
        if self.transformation is not None:
            data["transformation"] = self.transformation.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "JobConfiguration":
        """
        Validate and load a declared job block.

        Args:
            data: Mapping of declared attributes

        Returns:
            JobConfiguration instance

        Raises:
            SchemaError: If any attribute is missing or violates a constraint
        """
        context = "stream_analytics_job"
        data = expect_mapping(data, context)
        reject_unknown(data, JOB_FIELDS, context)

        policy = optional_str(data, "events_out_of_order_policy", context)
        job_state = optional_str(data, "job_state", context)
        tags = data.get("tags") or {}
        expect_mapping(tags, f"{context}.tags")

        transformation = data.get("transformation")
        if isinstance(transformation, list):
            # Block syntax allows a one-element list; more than one is an error.
            if len(transformation) > 1:
                raise SchemaError(f"{context}.transformation: at most one block is allowed")
            transformation = transformation[0] if transformation else None

        return cls(
            name=require_str(data, "name", context),
            sku=parse_enum(Sku, require_str(data, "sku", context), f"{context}.sku"),
            resource_group_name=require_str(data, "resource_group_name", context),
            location=normalize_location(require_str(data, "location", context)),
            tags=dict(tags),
            events_out_of_order_max_delay_in_seconds=optional_int(
                data, "events_out_of_order_max_delay_in_seconds", context
            ),
            events_out_of_order_policy=(
                parse_enum(OutOfOrderPolicy, policy, f"{context}.events_out_of_order_policy")
                if policy is not None else None
            ),
            job_state=(
                parse_enum(JobState, job_state, f"{context}.job_state")
                if job_state is not None else None
            ),
            functions=tuple(
                FunctionDecl.from_dict(f, f"function[{i}]")
                for i, f in enumerate(expect_list(data.get("function"), "function"))
            ),
            inputs=tuple(
                InputDecl.from_dict(inp, f"job_input[{i}]")
                for i, inp in enumerate(expect_list(data.get("job_input"), "job_input"))
            ),
            outputs=tuple(
                OutputDecl.from_dict(out, f"job_output[{i}]")
                for i, out in enumerate(expect_list(data.get("job_output"), "job_output"))
            ),
            transformation=(
                TransformationDecl.from_dict(transformation, "transformation")
                if transformation is not None else None
            ),
        )
