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
The manifest pipeline: an ordered list of stages that build one StatefulSet.

Stages run strictly in STAGE_ORDER and share a single manifest object. Each
stage writes only the fields it owns:

    Allocate         the manifest itself
    BaseIdentity     metadata, serviceName, selector, replicas, template labels and volumes
    ContainerAttach  template containers
    StorageAttach    volumeClaimTemplates
"""
import logging
from typing import Callable, List, Optional, Tuple

from ..BUILDERS.container_assembler import ContainerAssembler, ContainerSpecVisitor
from ..BUILDERS.control_plane_visitor import ControlPlaneContainerVisitor
from ..MODELS import naming
from ..MODELS.errors import ManifestError, StageError
from ..MODELS.kube_object import ObjectMeta
from ..MODELS.stage_context import StageContext
from ..MODELS.workload_manifest import (
    AccessMode,
    ConfigMapVolumeSource,
    LabelSelector,
    PersistentVolumeClaim,
    PersistentVolumeClaimSpec,
    Volume,
    WorkloadManifest,
)
from ..MODELS.container_descriptor import ResourceRequirements
from ..UTILS.quantity import Quantity

logger = logging.getLogger(__name__)

Stage = Callable[[Optional[WorkloadManifest], StageContext], WorkloadManifest]
VisitorFactory = Callable[[StageContext], ContainerSpecVisitor]

ALLOCATE = "Allocate"
BASE_IDENTITY = "BaseIdentity"
CONTAINER_ATTACH = "ContainerAttach"
STORAGE_ATTACH = "StorageAttach"

STAGE_ORDER = (ALLOCATE, BASE_IDENTITY, CONTAINER_ATTACH, STORAGE_ATTACH)


class ManifestPipeline:
    """
    Builds the control plane StatefulSet from a StageContext.
    """
    def __init__(
        self,
        visitor_factory: VisitorFactory = ControlPlaneContainerVisitor,
        assembler: Optional[ContainerAssembler] = None,
    ):
        """
        Initializes the pipeline.

        :param visitor_factory: Creates the container visitor for a context.
        :param assembler: Assembler driving the visitor.
        """
        self.visitor_factory = visitor_factory
        self.assembler = assembler or ContainerAssembler()

    @property
    def stages(self) -> List[Tuple[str, Stage]]:
        """
        The stages in the order they run.
        """
        return [
            (ALLOCATE, self.allocate),
            (BASE_IDENTITY, self.base_identity),
            (CONTAINER_ATTACH, self.container_attach),
            (STORAGE_ATTACH, self.storage_attach),
        ]

    def build(self, ctx: StageContext) -> WorkloadManifest:
        """
        Runs every stage and returns the finished manifest.

        :param ctx: Configuration for this build.
        :return: The complete manifest.
        :raises StageError: If any stage fails; no manifest is returned.
        """
        manifest = None
        for name, stage in self.stages:
            logger.debug("Running stage %s", name)
            try:
                result = stage(manifest, ctx)
            except StageError:
                raise
            except ManifestError as exc:
                raise StageError(name, str(exc)) from exc

            if manifest is not None and result is not manifest:
                raise StageError(name, "stage returned a different manifest object")
            manifest = result

        logger.info(
            "Built statefulset %s in namespace %s with %d replicas",
            manifest.name, ctx.namespace, manifest.spec.replicas,
        )
        return manifest

    def allocate(self, manifest: Optional[WorkloadManifest], ctx: StageContext) -> WorkloadManifest:
        return WorkloadManifest()

    def base_identity(self, manifest: WorkloadManifest, ctx: StageContext) -> WorkloadManifest:
        """
        Sets the name, headless service, selector, replica count, pod labels
        and the config map volume.
        """
        manifest.metadata.name = naming.CONTROL_PLANE_STATEFULSET_NAME
        manifest.metadata.namespace = ctx.namespace
        manifest.spec.service_name = naming.CONTROL_PLANE_HEADLESS_SERVICE_NAME

        # Separate copies so the selector cannot change through the template labels.
        manifest.spec.selector = LabelSelector(match_labels=naming.control_plane_labels())
        manifest.spec.replicas = ctx.replicas
        manifest.spec.template.metadata.labels = naming.control_plane_labels()
        manifest.spec.template.spec.volumes = [
            Volume(
                name=naming.CONTROL_PLANE_CONFIGMAP_NAME,
                config_map=ConfigMapVolumeSource(name=naming.CONTROL_PLANE_CONFIGMAP_NAME),
            ),
        ]
        return manifest

    def container_attach(self, manifest: WorkloadManifest, ctx: StageContext) -> WorkloadManifest:
        """
        Assembles the control plane container and sets it as the only container.
        """
        container = self.assembler.assemble(
            naming.CONTROL_PLANE_CONTAINER_NAME,
            ctx.image,
            ctx.image_pull_policy,
            self.visitor_factory(ctx),
        )
        manifest.spec.template.spec.containers = [container]
        return manifest

    def storage_attach(self, manifest: WorkloadManifest, ctx: StageContext) -> WorkloadManifest:
        """
        Appends the per-replica data volume claim.
        """
        capacity = Quantity.parse(ctx.persist_volume_capacity)
        claim = PersistentVolumeClaim(
            metadata=ObjectMeta(name=naming.CONTROL_PLANE_PVC_NAME),
            spec=PersistentVolumeClaimSpec(
                access_modes=[AccessMode.READ_WRITE_ONCE],
                storage_class_name=ctx.storage_class_name,
                resources=ResourceRequirements(requests={"storage": capacity}),
            ),
        )
        manifest.spec.volume_claim_templates.append(claim)
        return manifest


def build_statefulset(ctx: StageContext) -> WorkloadManifest:
    """
    Builds the control plane StatefulSet with the default visitor.
    """
    return ManifestPipeline().build(ctx)
