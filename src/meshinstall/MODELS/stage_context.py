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
Models for the resolved installer configuration that drives one manifest build.
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .container_descriptor import PullPolicy
from . import naming


class ResourcePolicy(BaseModel):
    """
    CPU and memory sizing of the control plane container.
    Values are quantity strings and are parsed when the container is assembled.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    cpu_request: str = "100m"
    cpu_limit: str = "1000m"
    memory_request: str = "1Gi"
    memory_limit: str = "2Gi"


class StageContext(BaseModel):
    """
    Read-only configuration snapshot for a single manifest build.
    Defaults match the installer's command line defaults.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Placement
    namespace: str = Field(default="easemesh", min_length=1)

    # Image
    image_registry_url: str = "docker.io"
    easegress_image: str = Field(default="megaease/easegress:server-sidecar", min_length=1)
    image_pull_policy: PullPolicy = PullPolicy.IF_NOT_PRESENT

    # Networking
    admin_port: int = Field(default=2381, gt=0, lt=65536)
    client_port: int = Field(default=2379, gt=0, lt=65536)
    peer_port: int = Field(default=2380, gt=0, lt=65536)
    peer_addresses: Optional[Tuple[str, ...]] = None

    # Cluster size and storage
    replicas: int = Field(default=3, ge=0)
    storage_class_name: str = "easemesh-storage"
    persist_volume_capacity: str = "3Gi"

    resources: ResourcePolicy = Field(default_factory=ResourcePolicy)

    @model_validator(mode="after")
    def _check_peer_addresses(self) -> "StageContext":
        if self.peer_addresses is None:
            return self
        if any(not address.strip() for address in self.peer_addresses):
            raise ValueError("peer_addresses must not contain empty entries")
        if len(self.peer_addresses) != self.replicas:
            raise ValueError(
                f"peer_addresses has {len(self.peer_addresses)} entries, expected one per replica ({self.replicas})"
            )
        return self

    @property
    def image(self) -> str:
        """Full image reference, prefixed with the registry when one is set."""
        registry = self.image_registry_url.rstrip("/")
        if not registry:
            return self.easegress_image
        return f"{registry}/{self.easegress_image}"

    def peer_hosts(self) -> List[str]:
        """
        Host names of the cluster members.

        Uses the configured peer addresses when present, otherwise the stable
        DNS names the StatefulSet gives each replica behind its headless service.
        """
        if self.peer_addresses is not None:
            return list(self.peer_addresses)
        return [
            naming.pod_dns_name(naming.replica_pod_name(i), self.namespace)
            for i in range(self.replicas)
        ]

    def peer_members(self) -> List[Tuple[str, str]]:
        """
        (member name, host) pairs of the cluster.

        Member names are the replica pod names, since each pod announces
        itself by its own name; peer_addresses[i] is the host of replica i.
        """
        return [
            (naming.replica_pod_name(i), host)
            for i, host in enumerate(self.peer_hosts())
        ]
