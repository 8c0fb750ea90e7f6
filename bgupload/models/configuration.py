"""
Upload configuration model.

End-to-end configuration shared between the producer and the executing
process. Immutable for the duration of a run.

Dependencies: pydantic, bgupload.core.retry_policy
System role: Run configuration contract
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bgupload.core.retry_policy import RetryPolicy
from bgupload.models.common import MetadataBag


class UploadConfiguration(BaseModel):
    """Configuration applied to every job of a run."""

    model_config = ConfigDict(frozen=True)

    extension_target: str = Field(description="Execution endpoint that receives jobs")
    transport_identifier: str = Field(
        default="default.transport",
        description="Routing key for multi-transport setups",
    )
    allows_cellular_access: bool = Field(default=True, description="Allow constrained networks")
    is_user_initiated: bool = Field(default=False, description="Priority hint to the scheduler")
    default_user_info: MetadataBag = Field(
        default_factory=dict,
        description="Merged into every job's user_info; per-call keys win",
    )
    maximum_concurrent_uploads: int = Field(
        default=2,
        description="Resources extracted concurrently per job",
    )
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy.exponential_backoff)

    @field_validator("maximum_concurrent_uploads", mode="before")
    @classmethod
    def _clamp_concurrency(cls, value: int) -> int:
        return max(1, int(value))
