"""Tests for schema module."""

import pytest
from pydantic import ValidationError

from shipyard.core.errors import ConfigLoadError, UnknownResourceTypeError
from shipyard.core.schema import (
    RESOURCE_TYPES,
    Container,
    ExecRemote,
    Ingress,
    ResourceType,
    format_address,
    new_resource,
    resource_class,
)


class TestResource:
    """Tests for resource variants."""

    def test_every_type_registered(self):
        """Test the registration table covers every tag."""
        assert set(RESOURCE_TYPES) == set(ResourceType)
        for tag, cls in RESOURCE_TYPES.items():
            assert cls.model_fields["type"].default == tag

    def test_address(self):
        """Test the address joins type and name."""
        container = Container(name="consul", image="consul:1.6.1")

        assert container.address == "container.consul"
        assert format_address(ResourceType.K8S_CONFIG, "dash") == "k8s_config.dash"

    def test_name_rejects_separator(self):
        """Test names that would break the address format."""
        with pytest.raises(ValidationError):
            Container(name="consul.server", image="consul")

    def test_name_required(self):
        """Test empty names."""
        with pytest.raises(ValidationError):
            Container(name="", image="consul")

    def test_unknown_attribute(self):
        """Test variant attributes are checked."""
        with pytest.raises(ValidationError):
            Container(name="consul", image="consul", subnet="10.0.0.0/16")

    def test_references(self):
        """Test only set reference attributes are reported."""
        ingress = Ingress(name="web", target="container.web")
        remote = ExecRemote(name="setup", network="network.cloud", target="cluster.k3s")

        assert ingress.references() == {"target": "container.web"}
        assert remote.references() == {"target": "cluster.k3s", "network": "network.cloud"}

    def test_repr(self):
        """Test repr shows address and status."""
        assert repr(Container(name="web", image="nginx")) == (
            "Container(container.web, status=pending_creation)"
        )

    def test_identity_frozen(self):
        """Test name and type can not be reassigned after construction."""
        container = Container(name="web", image="nginx")

        with pytest.raises(ValidationError):
            container.name = "other"
        with pytest.raises(ValidationError):
            container.type = ResourceType.NETWORK
        assert container.address == "container.web"

    def test_status_assignable(self):
        """Test status stays writable for the apply engine."""
        container = Container(name="web", image="nginx")
        container.status = "applied"

        assert container.status == "applied"


class TestNewResource:
    """Tests for constructing variants from type tags."""

    def test_new_resource(self):
        """Test the tag selects the variant."""
        resource = new_resource(
            "container",
            "web",
            image="nginx",
            volumes=[{"source": "/src", "destination": "/usr/share/nginx/html"}],
            ports=[{"local": 80, "host": 8080}],
        )

        assert isinstance(resource, Container)
        assert resource.volumes[0].destination == "/usr/share/nginx/html"
        assert resource.ports[0].protocol == "tcp"

    def test_new_resource_ignores_type_attribute(self):
        """Test a type attribute can not override the tag."""
        resource = new_resource("network", "cloud", type="cluster")

        assert resource.type == ResourceType.NETWORK

    def test_unknown_type(self):
        """Test unknown tags."""
        with pytest.raises(UnknownResourceTypeError) as exc_info:
            resource_class("vm")
        assert exc_info.value.resource_type == "vm"

    @pytest.mark.parametrize(
        "attributes",
        [
            {"status": "applied"},
            {"status": "pending_creation"},
            {"name": "other"},
        ],
    )
    def test_reserved_attributes(self, attributes):
        """Test blocks can not set their own name or status."""
        with pytest.raises(ConfigLoadError) as exc_info:
            new_resource("container", "web", image="nginx", **attributes)
        assert "container.web" in str(exc_info.value)
