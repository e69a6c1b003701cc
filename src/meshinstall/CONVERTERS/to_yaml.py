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
Converters for rendering manifests as Kubernetes YAML.
"""
import os
import yaml
from ..MODELS.workload_manifest import WorkloadManifest


class ManifestYamlConverter:
    """
    Renders a WorkloadManifest in the form accepted by kubectl apply.
    """

    def __init__(self, manifest: WorkloadManifest):
        """
        :param manifest: A finished manifest.
        """
        self.manifest = manifest

    def render(self) -> str:
        """
        Returns the manifest as a YAML document, keys in Kubernetes order.
        """
        return yaml.safe_dump(self.manifest.to_dict(), sort_keys=False, default_flow_style=False)

    def convert(self, output_dir: str = "manifests") -> str:
        """
        Writes the manifest to <output_dir>/<name>.yaml.

        :param output_dir: The directory where the file will be created.
        :return: The path of the written file.
        """
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, f"{self.manifest.name}.yaml")
        with open(path, "w") as f:
            f.write(self.render())
        return path
