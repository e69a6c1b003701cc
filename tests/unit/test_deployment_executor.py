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
Unit tests for the deployment executor.
"""
import pytest
from meshinstall.MANAGERS.deployment_executor import (
    DeploymentExecutor,
    control_plane_install_step,
)
from meshinstall.MODELS.errors import DeploymentError, StageError
from meshinstall.MODELS.stage_context import StageContext
from meshinstall.RUNNERS.manifest_pipeline import build_statefulset


class ApiError(Exception):
    def __init__(self, status):
        super().__init__(f"status {status}")
        self.status = status


class FakeStatefulSetApi:
    """Records calls; create fails with the configured status when set."""

    def __init__(self, create_status=None, replace_status=None):
        self.create_status = create_status
        self.replace_status = replace_status
        self.calls = []

    def create_namespaced_stateful_set(self, namespace, body):
        self.calls.append(("create", namespace, body["metadata"]["name"]))
        if self.create_status:
            raise ApiError(self.create_status)

    def replace_namespaced_stateful_set(self, name, namespace, body):
        self.calls.append(("replace", namespace, name))
        if self.replace_status:
            raise ApiError(self.replace_status)


class TestDeploymentExecutor:
    """Tests for DeploymentExecutor."""

    def test_create(self):
        api = FakeStatefulSetApi()
        DeploymentExecutor(api).deploy(build_statefulset(StageContext()), "easemesh")
        assert api.calls == [("create", "easemesh", "easemesh-control-plane")]

    def test_replace_on_conflict(self):
        api = FakeStatefulSetApi(create_status=409)
        DeploymentExecutor(api).deploy(build_statefulset(StageContext()), "easemesh")
        assert [call[0] for call in api.calls] == ["create", "replace"]

    def test_failure_is_wrapped(self):
        api = FakeStatefulSetApi(create_status=500)
        with pytest.raises(DeploymentError) as excinfo:
            DeploymentExecutor(api).deploy(build_statefulset(StageContext()), "easemesh")
        assert excinfo.value.manifest_name == "easemesh-control-plane"
        assert "deploy statefulset easemesh-control-plane failed" in str(excinfo.value)
        assert len(api.calls) == 1

    def test_replace_failure_is_wrapped(self):
        api = FakeStatefulSetApi(create_status=409, replace_status=422)
        with pytest.raises(DeploymentError):
            DeploymentExecutor(api).deploy(build_statefulset(StageContext()), "easemesh")

    def test_install_step(self):
        api = FakeStatefulSetApi()
        step = control_plane_install_step(StageContext(namespace="mesh"))
        step(api)
        assert api.calls == [("create", "mesh", "easemesh-control-plane")]

    def test_install_step_build_failure(self):
        with pytest.raises(StageError):
            control_plane_install_step(StageContext(persist_volume_capacity="abc"))
