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
Names, labels and paths shared by the control plane objects.
"""
from typing import Dict, Iterable, Tuple
from jinja2 import Template

CONTROL_PLANE_STATEFULSET_NAME = "easemesh-control-plane"
CONTROL_PLANE_HEADLESS_SERVICE_NAME = "easemesh-control-plane-hs"
CONTROL_PLANE_CONFIGMAP_NAME = "easemesh-cluster-cm"
CONTROL_PLANE_PVC_NAME = "easegress-control-plane-pv"

CONTROL_PLANE_CONTAINER_NAME = "easegress"
CONTROL_PLANE_SERVER_BINARY = "/opt/easegress/bin/easegress-server"
CONTROL_PLANE_DATA_DIR = "/opt/easegress/data"
CONTROL_PLANE_CONFIG_MOUNT_PATH = "/opt/easegress/config/eg-master.yaml"
CONTROL_PLANE_CONFIG_SUB_PATH = "eg-master.yaml"

ADMIN_PORT_NAME = "admin-port"
CLIENT_PORT_NAME = "client-port"
PEER_PORT_NAME = "peer-port"

# Filled by the kubelet from metadata.name, referenced as $(EG_NAME) in args.
POD_NAME_ENV = "EG_NAME"

CONTROL_PLANE_LABEL_KEY = "mesh-controlpanel-app"
CONTROL_PLANE_LABEL_VALUE = "easegress-mesh-controlpanel"

MEMBER_URL_TEMPLATE = Template("http://{{ host }}:{{ port }}")
POD_DNS_TEMPLATE = Template("{{ pod }}.{{ service }}.{{ namespace }}")


def control_plane_labels() -> Dict[str, str]:
    """
    Returns a fresh copy of the labels selecting control plane pods.
    """
    return {CONTROL_PLANE_LABEL_KEY: CONTROL_PLANE_LABEL_VALUE}


def replica_pod_name(ordinal: int) -> str:
    return f"{CONTROL_PLANE_STATEFULSET_NAME}-{ordinal}"


def pod_dns_name(pod: str, namespace: str) -> str:
    """
    DNS name of a pod behind the control plane headless service.
    """
    return POD_DNS_TEMPLATE.render(
        pod=pod, service=CONTROL_PLANE_HEADLESS_SERVICE_NAME, namespace=namespace
    )


def member_url(host: str, port: int) -> str:
    return MEMBER_URL_TEMPLATE.render(host=host, port=port)


def initial_cluster(members: Iterable[Tuple[str, str]], peer_port: int) -> str:
    """
    Renders the initial cluster membership string, e.g.
    'easemesh-control-plane-0=http://easemesh-control-plane-0.easemesh-control-plane-hs.easemesh:2380,...'

    :param members: (member name, host) pairs; names must match the pod names.
    :param peer_port: Port the members use to talk to each other.
    :return: Comma separated name=url entries.
    """
    return ",".join(f"{member}={member_url(host, peer_port)}" for member, host in members)
