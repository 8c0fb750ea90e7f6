"""
Pipeline contracts.

A Pipeline bundles the collaborators a JobProcessor needs. A
PipelineFactory builds one from an UploadConfiguration, so the executing
process can reconstruct the pipeline from configuration alone.

Dependencies: bgupload.core.processor
System role: Composition contract between configuration and processing
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from bgupload.boundary.resources.provider import ResourceProvider
from bgupload.boundary.state.store import JobStateStore
from bgupload.boundary.transport.base import Transport
from bgupload.core.processor import JobProcessor
from bgupload.models.configuration import UploadConfiguration


@dataclass
class Pipeline:
    transport: Transport
    job_store: JobStateStore
    resource_provider: ResourceProvider
    processor: JobProcessor = field(init=False)

    def __post_init__(self) -> None:
        self.processor = JobProcessor(
            transport=self.transport,
            job_store=self.job_store,
            resource_provider=self.resource_provider,
        )


class PipelineFactory(ABC):
    """Builds a Pipeline for a configuration."""

    @abstractmethod
    def make_pipeline(self, configuration: UploadConfiguration) -> Pipeline:
        """
        Build a pipeline.

        Args:
            configuration: Run configuration

        Returns:
            Pipeline: Ready-to-use collaborators
        """
        ...
