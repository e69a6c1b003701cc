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
Submission of finished manifests to the cluster.

The API object is injected; anything exposing the two StatefulSet methods of
the Kubernetes AppsV1Api works. No retries are attempted here.
"""
import logging
from typing import Any, Callable, Dict, Optional, Protocol

from ..MODELS.errors import DeploymentError
from ..MODELS.stage_context import StageContext
from ..MODELS.workload_manifest import WorkloadManifest
from ..RUNNERS.manifest_pipeline import ManifestPipeline

logger = logging.getLogger(__name__)

HTTP_CONFLICT = 409


class StatefulSetApi(Protocol):
    """
    The part of the cluster API used to create or replace a StatefulSet.
    """

    def create_namespaced_stateful_set(self, namespace: str, body: Dict[str, Any]) -> Any:
        ...

    def replace_namespaced_stateful_set(self, name: str, namespace: str, body: Dict[str, Any]) -> Any:
        ...


InstallStep = Callable[[StatefulSetApi], None]


def _is_conflict(exc: BaseException) -> bool:
    return getattr(exc, "status", None) == HTTP_CONFLICT


class DeploymentExecutor:
    """
    Creates a StatefulSet, replacing it when it already exists.
    """
    def __init__(self, api: StatefulSetApi):
        self.api = api

    def deploy(self, manifest: WorkloadManifest, namespace: str) -> None:
        """
        Submits the manifest.

        :param manifest: A finished manifest; it is not modified.
        :param namespace: Target namespace.
        :raises DeploymentError: If the cluster rejects the manifest.
        """
        name = manifest.name
        body = manifest.to_dict()
        try:
            try:
                self.api.create_namespaced_stateful_set(namespace, body)
                logger.info("Created statefulset %s in namespace %s", name, namespace)
            except Exception as exc:
                if not _is_conflict(exc):
                    raise
                logger.info("Statefulset %s exists, replacing it", name)
                self.api.replace_namespaced_stateful_set(name, namespace, body)
        except Exception as exc:
            raise DeploymentError(name, exc) from exc


def deploy_statefulset(manifest: WorkloadManifest, api: StatefulSetApi, namespace: str) -> None:
    DeploymentExecutor(api).deploy(manifest, namespace)


def control_plane_install_step(
    ctx: StageContext, pipeline: Optional[ManifestPipeline] = None
) -> InstallStep:
    """
    Builds the control plane manifest now and returns the step that deploys it.

    :param ctx: Configuration for the build.
    :param pipeline: Pipeline to use; defaults to the control plane pipeline.
    :return: A callable taking the cluster API object.
    :raises StageError: If the manifest cannot be built.
    """
    manifest = (pipeline or ManifestPipeline()).build(ctx)

    def install(api: StatefulSetApi) -> None:
        deploy_statefulset(manifest, api, ctx.namespace)

    return install
