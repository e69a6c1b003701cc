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
Models for the StatefulSet manifest built by the manifest pipeline.
"""
from typing import Dict, List, Optional
from pydantic import Field
from enum import Enum

from .kube_object import KubeModel, ObjectMeta
from .container_descriptor import ContainerDescriptor, ResourceRequirements


class AccessMode(str, Enum):
    """
    Access modes of a persistent volume claim.
    """
    READ_WRITE_ONCE = "ReadWriteOnce"
    READ_ONLY_MANY = "ReadOnlyMany"
    READ_WRITE_MANY = "ReadWriteMany"


class LabelSelector(KubeModel):
    match_labels: Dict[str, str] = {}


class ConfigMapVolumeSource(KubeModel):
    """
    References a config map by name; its content is managed elsewhere.
    """
    name: str


class Volume(KubeModel):
    name: str
    config_map: Optional[ConfigMapVolumeSource] = None


class PodSpec(KubeModel):
    volumes: Optional[List[Volume]] = None
    containers: List[ContainerDescriptor] = []


class PodTemplate(KubeModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodSpec = Field(default_factory=PodSpec)


class PersistentVolumeClaimSpec(KubeModel):
    access_modes: List[AccessMode] = []
    storage_class_name: Optional[str] = None
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)


class PersistentVolumeClaim(KubeModel):
    """
    A per-replica storage request attached to the StatefulSet.
    """
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PersistentVolumeClaimSpec = Field(default_factory=PersistentVolumeClaimSpec)


class StatefulSetSpec(KubeModel):
    service_name: Optional[str] = None
    selector: Optional[LabelSelector] = None
    replicas: Optional[int] = None
    template: PodTemplate = Field(default_factory=PodTemplate)
    volume_claim_templates: List[PersistentVolumeClaim] = []


class WorkloadManifest(KubeModel):
    """
    The stateful workload descriptor submitted to the cluster.

    A zero-valued instance has every nested structure allocated, so pipeline
    stages can assign into it without checking for None.
    """
    api_version: str = "apps/v1"
    kind: str = "StatefulSet"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: StatefulSetSpec = Field(default_factory=StatefulSetSpec)

    @property
    def name(self) -> Optional[str]:
        return self.metadata.name

    @property
    def selector_labels(self) -> Dict[str, str]:
        if self.spec.selector is None:
            return {}
        return self.spec.selector.match_labels

    @property
    def template_labels(self) -> Dict[str, str]:
        return self.spec.template.metadata.labels or {}

    @property
    def containers(self) -> List[ContainerDescriptor]:
        return self.spec.template.spec.containers
