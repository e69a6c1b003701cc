# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the container visitor contract and assembler.
"""
from collections import Counter

import pytest
from meshinstall.BUILDERS.container_assembler import (
    ContainerAssembler,
    ContainerSpecVisitor,
    accept_container_visitor,
)
from meshinstall.MODELS.container_descriptor import (
    ContainerPort,
    PullPolicy,
    ResourceRequirements,
)
from meshinstall.MODELS.errors import AssemblyError, QuantityParseError
from meshinstall.UTILS.quantity import Quantity


class RecordingVisitor(ContainerSpecVisitor):
    """Visitor double counting hook calls; contributes ports and an empty env list."""

    def __init__(self, fail_on=None):
        self.calls = Counter()
        self.seen = []
        self.fail_on = fail_on

    def _record(self, hook, container):
        self.calls[hook] += 1
        self.seen.append((container.name, container.image, container.command))
        if hook == self.fail_on:
            Quantity.parse("abc")

    def visit_command_and_args(self, container):
        self._record("command_and_args", container)
        return ["/bin/server"], ["--flag"]

    def visit_ports(self, container):
        self._record("ports", container)
        return [ContainerPort(name="http", container_port=80)]

    def visit_envs(self, container):
        self._record("envs", container)
        return []

    def visit_env_from(self, container):
        self._record("env_from", container)
        return None

    def visit_resource_requirements(self, container):
        self._record("resource_requirements", container)
        return ResourceRequirements(requests={"cpu": Quantity.parse("100m")})

    def visit_volume_mounts(self, container):
        self._record("volume_mounts", container)
        return None

    def visit_volume_devices(self, container):
        self._record("volume_devices", container)
        return None

    def visit_liveness_probe(self, container):
        self._record("liveness_probe", container)
        return None

    def visit_readiness_probe(self, container):
        self._record("readiness_probe", container)
        return None

    def visit_lifecycle(self, container):
        self._record("lifecycle", container)
        return None

    def visit_security_context(self, container):
        self._record("security_context", container)
        return None


class TestContainerAssembler:
    """Tests for ContainerAssembler."""

    def test_every_hook_called_once(self):
        """Test that each hook runs exactly once per assembly."""
        visitor = RecordingVisitor()
        ContainerAssembler().assemble("app", "nginx:1.21", PullPolicy.IF_NOT_PRESENT, visitor)
        assert set(visitor.calls) == set(ContainerAssembler.HOOKS)
        assert all(count == 1 for count in visitor.calls.values())
        assert len(ContainerAssembler.HOOKS) == 11

    def test_fields_populated(self):
        container = ContainerAssembler().assemble(
            "app", "nginx:1.21", PullPolicy.ALWAYS, RecordingVisitor()
        )
        assert container.name == "app"
        assert container.image == "nginx:1.21"
        assert container.image_pull_policy == PullPolicy.ALWAYS
        assert container.command == ["/bin/server"]
        assert container.args == ["--flag"]
        assert container.ports[0].container_port == 80
        assert container.resources.requests["cpu"].value * 1000 == 100

    def test_hooks_see_partial_container(self):
        """Test that hooks get name and image but no hook-owned fields."""
        visitor = RecordingVisitor()
        ContainerAssembler().assemble("app", "nginx", PullPolicy.NEVER, visitor)
        assert all(seen == ("app", "nginx", None) for seen in visitor.seen)

    def test_absent_and_empty_are_distinct(self):
        """Test that None is omitted and [] is emitted."""
        container = accept_container_visitor("app", "nginx", PullPolicy.NEVER, RecordingVisitor())
        data = container.to_dict()
        assert data["env"] == []
        assert "envFrom" not in data
        assert "livenessProbe" not in data
        assert data["imagePullPolicy"] == "Never"
        assert data["resources"] == {"requests": {"cpu": "100m"}}

    def test_hook_failure_aborts(self):
        """Test that a failing hook raises AssemblyError and stops assembly."""
        visitor = RecordingVisitor(fail_on="resource_requirements")
        with pytest.raises(AssemblyError) as excinfo:
            ContainerAssembler().assemble("app", "nginx", PullPolicy.NEVER, visitor)
        assert excinfo.value.hook == "resource_requirements"
        assert excinfo.value.container == "app"
        assert isinstance(excinfo.value.__cause__, QuantityParseError)
        assert visitor.calls["volume_mounts"] == 0

    def test_malformed_command_and_args_result(self):
        """Test that a hook returning a non-pair fails as an AssemblyError."""
        class NoCommandVisitor(RecordingVisitor):
            def visit_command_and_args(self, container):
                self._record("command_and_args", container)
                return None

        visitor = NoCommandVisitor()
        with pytest.raises(AssemblyError) as excinfo:
            ContainerAssembler().assemble("app", "nginx", PullPolicy.NEVER, visitor)
        assert excinfo.value.hook == "command_and_args"
        assert isinstance(excinfo.value.__cause__, TypeError)
        assert visitor.calls["ports"] == 0

    def test_incomplete_visitor_cannot_be_created(self):
        """Test that a visitor missing a hook is rejected."""
        class PortsOnly(ContainerSpecVisitor):
            def visit_ports(self, container):
                return []

        with pytest.raises(TypeError):
            PortsOnly()
