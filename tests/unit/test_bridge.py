"""
Test suite for PipelineRegistry, resolution strategies and the durable
configuration store.

System role: Verification of configuration hand-off to workers
"""

import json
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bgupload.application.bridge import (
    ConfigurationResolver,
    DurableStoreStrategy,
    PipelineRegistry,
    RegistryStrategy,
    StaticStrategy,
)
from bgupload.application.config_store import ConfigurationStore
from bgupload.core.exceptions import ConfigurationError, ResourcesMissing
from bgupload.core.pipeline import Pipeline, PipelineFactory
from bgupload.core.retry_policy import RetryPolicy
from bgupload.models.configuration import UploadConfiguration


class CountingFactory(PipelineFactory):
    """Factory building pipelines from fixed components, counting builds."""

    def __init__(self, transport, job_store, resource_provider) -> None:
        self.components = (transport, job_store, resource_provider)
        self.built_for: list[UploadConfiguration] = []

    def make_pipeline(self, configuration: UploadConfiguration) -> Pipeline:
        self.built_for.append(configuration)
        transport, job_store, resource_provider = self.components
        return Pipeline(transport=transport, job_store=job_store, resource_provider=resource_provider)


@pytest.fixture
def factory(transport, job_store, resource_provider) -> CountingFactory:
    return CountingFactory(transport, job_store, resource_provider)


class TestPipelineRegistry:
    """Test suite for the in-process registry."""

    def test_resolve_empty_registry(self) -> None:
        assert PipelineRegistry().resolve() is None

    def test_configuration_without_factory_unresolved(self, configuration) -> None:
        registry = PipelineRegistry()
        registry.update_configuration(configuration)

        assert registry.resolve() is None

    def test_register_then_configure_builds_once(self, factory, configuration) -> None:
        # Arrange
        registry = PipelineRegistry()

        # Act
        registry.register(factory)
        registry.update_configuration(configuration)
        first = registry.resolve()
        second = registry.resolve()

        # Assert
        assert first is not None
        assert first.configuration == configuration
        assert first.pipeline is second.pipeline
        assert len(factory.built_for) == 1

    def test_update_configuration_rebuilds(self, factory, configuration) -> None:
        # Arrange
        registry = PipelineRegistry()
        registry.register(factory)
        registry.update_configuration(configuration)
        updated = configuration.model_copy(update={"transport_identifier": "other"})

        # Act
        registry.update_configuration(updated)

        # Assert
        assert registry.resolve().configuration.transport_identifier == "other"
        assert factory.built_for[-1] == updated

    def test_factory_registered_after_configuration_builds(self, factory, configuration) -> None:
        registry = PipelineRegistry()
        registry.update_configuration(configuration)

        registry.register(factory)

        assert registry.resolve() is not None
        assert len(factory.built_for) == 1

    def test_concurrent_updates_leave_consistent_pair(self, factory, configuration) -> None:
        """Test the resolved pipeline always belongs to the resolved configuration."""
        # Arrange
        registry = PipelineRegistry()
        registry.register(factory)
        configs = [configuration.model_copy(update={"transport_identifier": f"t{i}"}) for i in range(20)]

        # Act
        threads = [threading.Thread(target=registry.update_configuration, args=(c,)) for c in configs]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        resolved = registry.resolve()

        # Assert
        assert resolved.configuration == factory.built_for[-1]

    @pytest.mark.asyncio
    async def test_resources_without_pipeline_raise_missing(self, job) -> None:
        with pytest.raises(ResourcesMissing):
            await PipelineRegistry().resources(job)

    @pytest.mark.asyncio
    async def test_resources_through_cached_pipeline(self, factory, configuration, job) -> None:
        registry = PipelineRegistry()
        registry.register(factory)
        registry.update_configuration(configuration)

        resources = await registry.resources(job)

        assert len(resources) == 2

    def test_clear(self, factory, configuration) -> None:
        registry = PipelineRegistry()
        registry.register(factory)
        registry.update_configuration(configuration)

        registry.clear()

        assert registry.resolve() is None


class TestConfigurationStore:
    """Test suite for the JSON configuration file."""

    def test_load_missing_returns_none(self, tmp_path: Path) -> None:
        assert ConfigurationStore(tmp_path / "config.json").load() is None

    def test_save_then_load(self, tmp_path: Path, configuration) -> None:
        # Arrange
        store = ConfigurationStore(tmp_path / "nested" / "config.json")
        stored = configuration.model_copy(update={"default_user_info": {"album": "Trip", "n": 3}})

        # Act
        store.save(stored)
        loaded = store.load()

        # Assert
        assert loaded == stored
        assert loaded.retry_policy.delay(2) == 4
        assert list((tmp_path / "nested").iterdir()) == [tmp_path / "nested" / "config.json"]

    def test_custom_policy_cannot_be_saved(self, tmp_path: Path, configuration) -> None:
        store = ConfigurationStore(tmp_path / "config.json")
        config = configuration.model_copy(update={"retry_policy": RetryPolicy.custom(lambda a: 1.0)})

        with pytest.raises(ConfigurationError):
            store.save(config)
        assert not store.path.exists()

    def test_corrupt_document_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"extension_target": 5, "retry_policy": {"strategy": {"kind": "?"}}}))

        with pytest.raises(ConfigurationError):
            ConfigurationStore(path).load()

    def test_clear_removes_file(self, tmp_path: Path, configuration) -> None:
        store = ConfigurationStore(tmp_path / "config.json")
        store.save(configuration)

        store.clear()
        store.clear()

        assert store.load() is None


class TestConfigurationResolver:
    """Test suite for ordered resolution strategies."""

    def test_registry_wins_when_populated(self, factory, configuration, tmp_path: Path) -> None:
        # Arrange
        registry = PipelineRegistry()
        registry.register(factory)
        registry.update_configuration(configuration)
        fallback = configuration.model_copy(update={"transport_identifier": "fallback"})
        resolver = ConfigurationResolver(
            [
                RegistryStrategy(registry),
                DurableStoreStrategy(ConfigurationStore(tmp_path / "c.json"), factory),
                StaticStrategy(fallback, factory),
            ]
        )

        # Act
        resolved = resolver.resolve()

        # Assert
        assert resolved.configuration == configuration

    def test_durable_store_used_in_fresh_process(self, factory, configuration, tmp_path: Path) -> None:
        """Test a cold worker reloads what the producer persisted and caches it."""
        # Arrange
        store = ConfigurationStore(tmp_path / "c.json")
        store.save(configuration)
        registry = PipelineRegistry()
        resolver = ConfigurationResolver(
            [RegistryStrategy(registry), DurableStoreStrategy(store, factory, registry)]
        )

        # Act
        resolved = resolver.resolve()

        # Assert
        assert resolved.configuration == configuration
        assert registry.resolve() is not None

    def test_static_fallback(self, factory, configuration, tmp_path: Path) -> None:
        resolver = ConfigurationResolver(
            [
                RegistryStrategy(PipelineRegistry()),
                DurableStoreStrategy(ConfigurationStore(tmp_path / "c.json"), factory),
                StaticStrategy(configuration, factory),
            ]
        )

        assert resolver.resolve().configuration == configuration

    def test_failing_strategy_skipped(self, factory, configuration, tmp_path: Path) -> None:
        # Arrange
        path = tmp_path / "c.json"
        path.write_text("{not json")
        resolver = ConfigurationResolver(
            [
                DurableStoreStrategy(ConfigurationStore(path), factory),
                StaticStrategy(configuration, factory),
            ]
        )

        # Act
        resolved = resolver.resolve()

        # Assert
        assert resolved.configuration == configuration

    def test_nothing_resolves(self, tmp_path: Path) -> None:
        broken = MagicMock()
        broken.name = "broken"
        broken.resolve.side_effect = RuntimeError("boom")

        resolver = ConfigurationResolver([RegistryStrategy(PipelineRegistry()), broken])

        assert resolver.resolve() is None
