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
The container visitor contract and the assembler that drives it.

A visitor decides what goes into a container (command line, ports, sizing);
the assembler owns how the container object is put together. New installer
variants supply a different visitor without touching the assembler.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..MODELS.container_descriptor import (
    ContainerDescriptor,
    ContainerPort,
    EnvFromSource,
    EnvVar,
    Lifecycle,
    Probe,
    PullPolicy,
    ResourceRequirements,
    SecurityContext,
    VolumeDevice,
    VolumeMount,
)
from ..MODELS.errors import AssemblyError

logger = logging.getLogger(__name__)


class ContainerSpecVisitor(ABC):
    """
    Supplies the field groups of one container.

    Each hook receives the container being assembled with only its name,
    image and pull policy set. Hooks must not depend on each other. A hook
    with nothing to contribute returns None (field omitted) or an empty list
    (field emitted empty); it raises only on genuine failures.
    """

    @abstractmethod
    def visit_command_and_args(
        self, container: ContainerDescriptor
    ) -> Tuple[Optional[List[str]], Optional[List[str]]]:
        """Returns the (command, args) pair."""

    @abstractmethod
    def visit_ports(self, container: ContainerDescriptor) -> Optional[List[ContainerPort]]:
        pass

    @abstractmethod
    def visit_envs(self, container: ContainerDescriptor) -> Optional[List[EnvVar]]:
        pass

    @abstractmethod
    def visit_env_from(self, container: ContainerDescriptor) -> Optional[List[EnvFromSource]]:
        pass

    @abstractmethod
    def visit_resource_requirements(
        self, container: ContainerDescriptor
    ) -> Optional[ResourceRequirements]:
        pass

    @abstractmethod
    def visit_volume_mounts(self, container: ContainerDescriptor) -> Optional[List[VolumeMount]]:
        pass

    @abstractmethod
    def visit_volume_devices(self, container: ContainerDescriptor) -> Optional[List[VolumeDevice]]:
        pass

    @abstractmethod
    def visit_liveness_probe(self, container: ContainerDescriptor) -> Optional[Probe]:
        pass

    @abstractmethod
    def visit_readiness_probe(self, container: ContainerDescriptor) -> Optional[Probe]:
        pass

    @abstractmethod
    def visit_lifecycle(self, container: ContainerDescriptor) -> Optional[Lifecycle]:
        pass

    @abstractmethod
    def visit_security_context(self, container: ContainerDescriptor) -> Optional[SecurityContext]:
        pass


class ContainerAssembler:
    """
    Builds a ContainerDescriptor by calling every visitor hook exactly once.
    """

    # Fixed call order; each name maps to the visitor method visit_<name>.
    HOOKS = (
        "command_and_args",
        "ports",
        "envs",
        "env_from",
        "resource_requirements",
        "volume_mounts",
        "volume_devices",
        "liveness_probe",
        "readiness_probe",
        "lifecycle",
        "security_context",
    )

    def assemble(
        self,
        name: str,
        image: str,
        pull_policy: PullPolicy,
        visitor: ContainerSpecVisitor,
    ) -> ContainerDescriptor:
        """
        Assembles one container.

        :param name: Container name.
        :param image: Full image reference.
        :param pull_policy: Image pull policy.
        :param visitor: Supplies the remaining field groups.
        :return: The completed container.
        :raises AssemblyError: On the first hook failure; no container is returned.
        """
        container = ContainerDescriptor(name=name, image=image, image_pull_policy=pull_policy)

        results = {}
        for hook in self.HOOKS:
            visit = getattr(visitor, f"visit_{hook}")
            try:
                result = visit(container)
                if hook == "command_and_args":
                    command, args = result
                    result = (command, args)
                results[hook] = result
            except Exception as exc:
                logger.debug("Hook %s of container %s failed: %s", hook, name, exc)
                raise AssemblyError(name, hook, exc) from exc

        container.command, container.args = results["command_and_args"]
        container.ports = results["ports"]
        container.env = results["envs"]
        container.env_from = results["env_from"]
        container.resources = results["resource_requirements"]
        container.volume_mounts = results["volume_mounts"]
        container.volume_devices = results["volume_devices"]
        container.liveness_probe = results["liveness_probe"]
        container.readiness_probe = results["readiness_probe"]
        container.lifecycle = results["lifecycle"]
        container.security_context = results["security_context"]

        logger.debug("Assembled container %s from image %s", name, image)
        return container


def accept_container_visitor(
    name: str,
    image: str,
    pull_policy: PullPolicy,
    visitor: ContainerSpecVisitor,
) -> ContainerDescriptor:
    """
    Shorthand for ContainerAssembler().assemble(...).
    """
    return ContainerAssembler().assemble(name, image, pull_policy, visitor)
