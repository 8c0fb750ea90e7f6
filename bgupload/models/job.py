"""
Job domain models.

JobRequest is the mutable per-asset request a producer may customise
before submission; JobDescriptor is the immutable snapshot that travels
to the executing process.

Dependencies: pydantic
System role: Job contracts between producer and worker
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bgupload.models.common import MetadataBag, ResourceKind


def _unique_kinds(kinds) -> tuple[ResourceKind, ...]:
    if not isinstance(kinds, (list, tuple, set, frozenset)):
        raise ValueError(f"requested_resource_kinds must be a sequence, got {type(kinds).__name__}")
    ordered: list[ResourceKind] = []
    for kind in kinds:
        kind = ResourceKind(kind)
        if kind not in ordered:
            ordered.append(kind)
    return tuple(ordered)


class JobDescriptor(BaseModel):
    """Immutable snapshot of an enqueued upload job."""

    model_config = ConfigDict(frozen=True)

    local_identifier: str = Field(description="Unique job identifier")
    asset_identifier: str = Field(description="Reference to the source asset")
    requested_resource_kinds: tuple[ResourceKind, ...] = Field(
        default=(),
        description="Kinds to upload, in order; empty uploads every resource",
    )
    user_info: MetadataBag = Field(default_factory=dict, description="Opaque job metadata")

    @field_validator("requested_resource_kinds", mode="before")
    @classmethod
    def _dedupe_kinds(cls, value):
        return _unique_kinds(value or ())


class JobRequest(BaseModel):
    """
    Mutable per-asset request handed to the enqueue customisation callback.

    Attributes mirror UploadConfiguration scheduling options so a caller can
    override them for a single asset.
    """

    model_config = ConfigDict(validate_assignment=True)

    asset_identifier: str
    extension_target: str
    transport_identifier: str
    allows_cellular_access: bool = True
    is_user_initiated: bool = False
    user_info: MetadataBag = Field(default_factory=dict)
    requested_resource_kinds: list[ResourceKind] = Field(default_factory=list)

    def make_descriptor(self) -> JobDescriptor:
        """
        Snapshot the request into a descriptor with a fresh job identifier.

        Returns:
            JobDescriptor: Immutable job snapshot
        """
        return JobDescriptor(
            local_identifier=str(uuid.uuid4()),
            asset_identifier=self.asset_identifier,
            requested_resource_kinds=tuple(self.requested_resource_kinds),
            user_info=dict(self.user_info),
        )


class JobContext(BaseModel):
    """A job plus the attempt currently executing, passed to transports."""

    model_config = ConfigDict(frozen=True)

    job: JobDescriptor
    attempt: int = Field(ge=1, description="1-based attempt number, for tracing only")
