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
Models describing a single container of a pod template, including ports,
environment, resources, mounts, probes, lifecycle hooks and security context.
"""
from typing import Dict, List, Optional, Union
from pydantic import Field
from enum import Enum

from .kube_object import KubeModel
from ..UTILS.quantity import Quantity


class PullPolicy(str, Enum):
    """
    When the kubelet pulls the container image.
    """
    ALWAYS = "Always"
    IF_NOT_PRESENT = "IfNotPresent"
    NEVER = "Never"


class ContainerPort(KubeModel):
    """
    A named port exposed by the container.
    """
    name: str
    container_port: int
    protocol: Optional[str] = None


class ObjectFieldSelector(KubeModel):
    field_path: str


class EnvVarSource(KubeModel):
    field_ref: Optional[ObjectFieldSelector] = None


class EnvVar(KubeModel):
    """
    A single environment variable, either literal or taken from the pod.
    """
    name: str
    value: Optional[str] = None
    value_from: Optional[EnvVarSource] = None


class ConfigMapEnvSource(KubeModel):
    name: str


class EnvFromSource(KubeModel):
    prefix: Optional[str] = None
    config_map_ref: Optional[ConfigMapEnvSource] = None


class ResourceRequirements(KubeModel):
    """
    Resource requests and limits keyed by resource name ('cpu', 'memory', 'storage').
    """
    requests: Optional[Dict[str, Quantity]] = None
    limits: Optional[Dict[str, Quantity]] = None


class VolumeMount(KubeModel):
    """
    Mounts a pod volume into the container filesystem.
    """
    name: str
    mount_path: str
    sub_path: Optional[str] = None
    read_only: Optional[bool] = None


class VolumeDevice(KubeModel):
    name: str
    device_path: str


class ExecAction(KubeModel):
    command: List[str] = []


class HTTPGetAction(KubeModel):
    path: Optional[str] = None
    port: Union[int, str]
    host: Optional[str] = None
    scheme: Optional[str] = None


class TCPSocketAction(KubeModel):
    port: Union[int, str]
    host: Optional[str] = None


class Probe(KubeModel):
    """
    Liveness or readiness check run by the kubelet.
    """
    exec_action: Optional[ExecAction] = Field(default=None, alias="exec")
    http_get: Optional[HTTPGetAction] = None
    tcp_socket: Optional[TCPSocketAction] = None
    initial_delay_seconds: Optional[int] = None
    period_seconds: Optional[int] = None
    timeout_seconds: Optional[int] = None
    failure_threshold: Optional[int] = None


class LifecycleHandler(KubeModel):
    exec_action: Optional[ExecAction] = Field(default=None, alias="exec")
    http_get: Optional[HTTPGetAction] = None


class Lifecycle(KubeModel):
    post_start: Optional[LifecycleHandler] = None
    pre_stop: Optional[LifecycleHandler] = None


class SecurityContext(KubeModel):
    run_as_user: Optional[int] = None
    run_as_group: Optional[int] = None
    run_as_non_root: Optional[bool] = None
    privileged: Optional[bool] = None
    read_only_root_filesystem: Optional[bool] = None
    allow_privilege_escalation: Optional[bool] = None


class ContainerDescriptor(KubeModel):
    """
    The full specification of one container.

    Every field after image_pull_policy is owned by one container visitor hook.
    None means the hook had nothing to contribute and the field is omitted;
    an empty list is emitted as an empty list.
    """
    name: str
    image: str
    image_pull_policy: Optional[PullPolicy] = None

    # Execution
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None

    # Networking and environment
    ports: Optional[List[ContainerPort]] = None
    env: Optional[List[EnvVar]] = None
    env_from: Optional[List[EnvFromSource]] = None

    # Resources and storage
    resources: Optional[ResourceRequirements] = None
    volume_mounts: Optional[List[VolumeMount]] = None
    volume_devices: Optional[List[VolumeDevice]] = None

    # Lifecycle
    liveness_probe: Optional[Probe] = None
    readiness_probe: Optional[Probe] = None
    lifecycle: Optional[Lifecycle] = None
    security_context: Optional[SecurityContext] = None
