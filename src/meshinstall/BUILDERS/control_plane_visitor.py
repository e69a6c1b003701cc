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
Container visitor for the Easegress control plane server.
"""
from typing import List, Optional, Tuple

from .container_assembler import ContainerSpecVisitor
from ..MODELS import naming
from ..MODELS.stage_context import StageContext
from ..MODELS.container_descriptor import (
    ContainerDescriptor,
    ContainerPort,
    EnvFromSource,
    EnvVar,
    EnvVarSource,
    Lifecycle,
    ObjectFieldSelector,
    Probe,
    ResourceRequirements,
    SecurityContext,
    VolumeDevice,
    VolumeMount,
)
from ..UTILS.quantity import Quantity


class ControlPlaneContainerVisitor(ContainerSpecVisitor):
    """
    Supplies the command line, ports, environment, sizing and mounts of the
    control plane container from a StageContext.
    """

    def __init__(self, ctx: StageContext):
        self.ctx = ctx

    def _advertise_url(self, port: int) -> str:
        # The pod resolves $(EG_NAME) to its own name at start.
        host = naming.pod_dns_name(f"$({naming.POD_NAME_ENV})", self.ctx.namespace)
        return naming.member_url(host, port)

    def visit_command_and_args(
        self, container: ContainerDescriptor
    ) -> Tuple[Optional[List[str]], Optional[List[str]]]:
        initial_cluster = naming.initial_cluster(self.ctx.peer_members(), self.ctx.peer_port)
        command = [naming.CONTROL_PLANE_SERVER_BINARY]
        args = [
            "-f", naming.CONTROL_PLANE_CONFIG_MOUNT_PATH,
            "--advertise-client-urls", self._advertise_url(self.ctx.client_port),
            "--initial-advertise-peer-urls", self._advertise_url(self.ctx.peer_port),
            "--initial-cluster", initial_cluster,
        ]
        return command, args

    def visit_ports(self, container: ContainerDescriptor) -> Optional[List[ContainerPort]]:
        return [
            ContainerPort(name=naming.ADMIN_PORT_NAME, container_port=self.ctx.admin_port),
            ContainerPort(name=naming.CLIENT_PORT_NAME, container_port=self.ctx.client_port),
            ContainerPort(name=naming.PEER_PORT_NAME, container_port=self.ctx.peer_port),
        ]

    def visit_envs(self, container: ContainerDescriptor) -> Optional[List[EnvVar]]:
        # Cluster options are passed as flags: nested config keys set through
        # env would be overwritten by the empty fields of the config file.
        return [
            EnvVar(
                name=naming.POD_NAME_ENV,
                value_from=EnvVarSource(field_ref=ObjectFieldSelector(field_path="metadata.name")),
            ),
        ]

    def visit_env_from(self, container: ContainerDescriptor) -> Optional[List[EnvFromSource]]:
        return None

    def visit_resource_requirements(
        self, container: ContainerDescriptor
    ) -> Optional[ResourceRequirements]:
        policy = self.ctx.resources
        return ResourceRequirements(
            requests={
                "cpu": Quantity.parse(policy.cpu_request),
                "memory": Quantity.parse(policy.memory_request),
            },
            limits={
                "cpu": Quantity.parse(policy.cpu_limit),
                "memory": Quantity.parse(policy.memory_limit),
            },
        )

    def visit_volume_mounts(self, container: ContainerDescriptor) -> Optional[List[VolumeMount]]:
        return [
            VolumeMount(
                name=naming.CONTROL_PLANE_PVC_NAME,
                mount_path=naming.CONTROL_PLANE_DATA_DIR,
            ),
            VolumeMount(
                name=naming.CONTROL_PLANE_CONFIGMAP_NAME,
                mount_path=naming.CONTROL_PLANE_CONFIG_MOUNT_PATH,
                sub_path=naming.CONTROL_PLANE_CONFIG_SUB_PATH,
            ),
        ]

    def visit_volume_devices(self, container: ContainerDescriptor) -> Optional[List[VolumeDevice]]:
        return None

    def visit_liveness_probe(self, container: ContainerDescriptor) -> Optional[Probe]:
        return None

    def visit_readiness_probe(self, container: ContainerDescriptor) -> Optional[Probe]:
        # No readiness probe: cluster bootstrap needs the peers' DNS records,
        # which are only published for ready pods.
        return None

    def visit_lifecycle(self, container: ContainerDescriptor) -> Optional[Lifecycle]:
        return None

    def visit_security_context(self, container: ContainerDescriptor) -> Optional[SecurityContext]:
        return None
