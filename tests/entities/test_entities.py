# tests/entities/test_entities.py
"""Tests for the entity-emitting node kinds."""

import pytest


class TestResource:
    def test_body_omits_empty_properties(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Resource

        bucket = Resource(Stack(App(), "S"), "Bucket", resource_type="AWS::S3::Bucket")
        assert bucket.entity_body() == {"Type": "AWS::S3::Bucket"}

    def test_set_property(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Resource

        bucket = Resource(Stack(App(), "S"), "Bucket", resource_type="T", properties={"a": 1})
        bucket.set_property("b", 2)

        assert bucket.entity_body() == {"Type": "T", "Properties": {"a": 1, "b": 2}}

    def test_properties_returns_copy(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Resource

        bucket = Resource(Stack(App(), "S"), "Bucket", resource_type="T")
        bucket.properties["sneaky"] = True

        assert bucket.properties == {}

    def test_resource_type_required(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Resource

        with pytest.raises(ValueError):
            Resource(Stack(App(), "S"), "Bucket", resource_type="")

    def test_list_shaped_attribute(self) -> None:
        from arbor.contracts.enums import TokenShape
        from arbor.core.tree import App, Stack
        from arbor.entities import Resource

        vpc = Resource(Stack(App(), "S"), "Vpc", resource_type="T")
        zones = vpc.get_att("AvailabilityZones", shape=TokenShape.LIST)

        assert zones.shape == TokenShape.LIST
        assert zones[0].shape == TokenShape.STRING


class TestParameter:
    def test_full_body(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Parameter

        password = Parameter(
            Stack(App(), "S"),
            "DbPassword",
            description="Master password",
            no_echo=True,
        )

        assert password.entity_body() == {"Type": "String", "Description": "Master password", "NoEcho": True}

    def test_list_parameter_value_is_list_shaped(self) -> None:
        from arbor.contracts.enums import TokenShape
        from arbor.core.tree import App, Stack
        from arbor.entities import Parameter

        stack = Stack(App(), "S")
        subnets = Parameter(stack, "Subnets", type="List<AWS::EC2::Subnet::Id>")
        zones = Parameter(stack, "Zones", type="CommaDelimitedList", default="a,b")

        assert subnets.value.shape == TokenShape.LIST
        assert zones.value.shape == TokenShape.LIST
        assert zones.entity_body()["Default"] == "a,b"


class TestOutput:
    def test_body_with_export(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Output

        output = Output(Stack(App(), "S"), "Url", value="https://example.org", description="Site", export_name="site-url")

        assert output.entity_body() == {
            "Value": "https://example.org",
            "Description": "Site",
            "Export": {"Name": "site-url"},
        }

    def test_import_requires_export_name(self) -> None:
        from arbor.core.tree import App, Stack
        from arbor.entities import Output

        output = Output(Stack(App(), "S"), "Url", value="x")

        with pytest.raises(ValueError, match="not exported"):
            output.import_value()
