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
Exceptions raised while building and deploying the control plane manifest.
"""
from typing import Optional


class ManifestError(Exception):
    """
    Base class for every failure of a manifest build or deployment.
    """


class QuantityParseError(ManifestError, ValueError):
    """
    Raised when a resource quantity string such as '10Gi' cannot be parsed.
    """
    def __init__(self, text: str, reason: str = "malformed quantity"):
        self.text = text
        super().__init__(f"cannot parse quantity {text!r}: {reason}")


class ConfigError(ManifestError):
    """
    Raised when the installer configuration cannot be loaded or validated.
    """


class AssemblyError(ManifestError):
    """
    Raised when a container visitor hook fails during container assembly.
    """
    def __init__(self, container: str, hook: str, cause: Optional[BaseException] = None):
        self.container = container
        self.hook = hook
        message = f"container {container}: hook {hook} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StageError(ManifestError):
    """
    Raised when a manifest pipeline stage fails.
    """
    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"stage {stage} failed: {message}")


class DeploymentError(ManifestError):
    """
    Raised when a finished manifest cannot be submitted to the cluster.
    """
    def __init__(self, manifest_name: str, cause: Optional[BaseException] = None):
        self.manifest_name = manifest_name
        message = f"deploy statefulset {manifest_name} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
