"""Tests for registry module."""

import pytest

from shipyard.core.errors import (
    ConfigLoadError,
    MalformedAddressError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from shipyard.core.registry import Config
from shipyard.core.schema import Cluster, Container, Network, ResourceType, parse_address
from shipyard.core.status import Status


@pytest.fixture
def sample_config_data():
    """Sample config data for testing."""
    return {
        "blueprint": {"title": "Test Stack", "author": "Ops"},
        "resources": [
            {"type": "network", "name": "cloud", "subnet": "10.5.0.0/16"},
            {
                "type": "cluster",
                "name": "k3s",
                "network": "network.cloud",
                "depends_on": ["network.cloud"],
            },
            {
                "type": "container",
                "name": "consul",
                "image": "consul:1.6.1",
                "network": "network.cloud",
                "depends_on": ["network.cloud"],
            },
            {
                "type": "helm",
                "name": "vault",
                "cluster": "cluster.k3s",
                "depends_on": ["cluster.k3s"],
            },
        ],
    }


class TestParseAddress:
    """Tests for address parsing."""

    def test_parse_address(self):
        """Test splitting a well formed address."""
        assert parse_address("cluster.k3s") == ("cluster", "k3s")

    @pytest.mark.parametrize("raw", ["cluster", "", ".k3s", "cluster.", "a.b.c", "."])
    def test_malformed_address(self, raw):
        """Test addresses without exactly two non-empty segments."""
        with pytest.raises(MalformedAddressError) as exc_info:
            parse_address(raw)
        assert exc_info.value.raw == raw


class TestConfig:
    """Tests for Config class."""

    def test_config_from_dict(self, sample_config_data):
        """Test config creation from dictionary."""
        config = Config.from_dict(sample_config_data)

        assert config.resource_count() == 4
        assert len(config) == 4
        assert config.blueprint.title == "Test Stack"

    def test_new_config_has_wan(self):
        """Test the default config holds the wan network."""
        config = Config.new()

        wan = config.find_resource("network.wan")
        assert wan.subnet == "10.200.0.0/16"
        assert config.resource_count() == 1

    def test_empty_config(self):
        """Test a bare config is empty."""
        config = Config()

        assert config.resource_count() == 0
        assert config.blueprint is None

    def test_find_resource(self, sample_config_data):
        """Test every added resource is found at its address."""
        config = Config.from_dict(sample_config_data)

        for resource in config:
            assert config.find_resource(f"{resource.type.value}.{resource.name}") is resource

    def test_find_resource_shares_instance(self):
        """Test status changes are visible through lookups."""
        config = Config()
        network = Network(name="cloud")
        config.add_resource(network)

        network.status = Status.APPLIED
        assert config.find_resource("network.cloud").status == Status.APPLIED

    def test_find_resource_not_found(self, sample_config_data):
        """Test looking up a missing address."""
        config = Config.from_dict(sample_config_data)

        with pytest.raises(ResourceNotFoundError) as exc_info:
            config.find_resource("cluster.missing")
        assert exc_info.value.address == "cluster.missing"
        assert "Resource not found" in str(exc_info.value)

    def test_find_resource_requires_type(self, sample_config_data):
        """Test names are never matched without their type."""
        config = Config.from_dict(sample_config_data)

        with pytest.raises(ResourceNotFoundError):
            config.find_resource("network.k3s")

    def test_find_resource_missing_separator(self, sample_config_data):
        """Test an address without a separator is malformed."""
        config = Config.from_dict(sample_config_data)

        with pytest.raises(MalformedAddressError):
            config.find_resource("cluster")

    def test_find_resource_extra_separator(self, sample_config_data):
        """Test an address with two separators is malformed."""
        config = Config.from_dict(sample_config_data)

        with pytest.raises(MalformedAddressError):
            config.find_resource("cluster.k3s.extra")

    def test_add_duplicate(self):
        """Test adding the same address twice."""
        config = Config()
        config.add_resource(Network(name="cloud"))

        with pytest.raises(ResourceExistsError) as exc_info:
            config.add_resource(Network(name="cloud", subnet="10.6.0.0/16"))

        assert exc_info.value.address == "network.cloud"
        assert config.resource_count() == 1
        assert config.find_resource("network.cloud").subnet is None

    def test_same_name_different_type(self):
        """Test names only need to be unique within a type."""
        config = Config()
        config.add_resource(Network(name="k3s"))
        config.add_resource(Cluster(name="k3s"))

        assert config.resource_count() == 2
        assert config.find_resource("network.k3s").type == ResourceType.NETWORK
        assert config.find_resource("cluster.k3s").type == ResourceType.CLUSTER

    def test_add_does_not_mutate(self):
        """Test registration leaves the resource untouched."""
        config = Config()
        container = Container(name="app", image="nginx", depends_on=["network.cloud"])
        before = container.model_dump()

        config.add_resource(container)

        assert container.model_dump() == before

    def test_registration_order(self, sample_config_data):
        """Test iteration follows insertion order."""
        config = Config.from_dict(sample_config_data)

        assert [r.address for r in config] == [
            "network.cloud",
            "cluster.k3s",
            "container.consul",
            "helm.vault",
        ]
        assert config.index_of("container.consul") == 2

    def test_index_of_missing(self):
        """Test position lookup for an unknown address."""
        with pytest.raises(ResourceNotFoundError):
            Config().index_of("network.cloud")

    def test_by_type(self, sample_config_data):
        """Test filtering by type."""
        config = Config.from_dict(sample_config_data)

        assert [r.name for r in config.by_type(ResourceType.CLUSTER)] == ["k3s"]
        assert [r.name for r in config.by_type("helm")] == ["vault"]
        assert config.by_type("docs") == []

    def test_types(self, sample_config_data):
        """Test getting present types."""
        config = Config.from_dict(sample_config_data)

        assert config.types() == {
            ResourceType.NETWORK,
            ResourceType.CLUSTER,
            ResourceType.CONTAINER,
            ResourceType.HELM,
        }

    def test_contains(self, sample_config_data):
        """Test __contains__ method."""
        config = Config.from_dict(sample_config_data)

        assert "cluster.k3s" in config
        assert "cluster.missing" not in config
        assert "k3s" not in config

    def test_get(self, sample_config_data):
        """Test lookups that return None instead of raising."""
        config = Config.from_dict(sample_config_data)

        assert config.get("helm.vault").name == "vault"
        assert config.get("helm.missing") is None
        assert config.get("helm") is None

    def test_from_dict_rejects_status(self, sample_config_data):
        """Test plain data can not preset a resource status."""
        sample_config_data["resources"][0]["status"] = "applied"

        with pytest.raises(ConfigLoadError):
            Config.from_dict(sample_config_data)
