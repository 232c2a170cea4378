from typing import Any

from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.kubernetes_utils import get_internal_service_name
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters


class InternalServiceDecorator(AbstractKubernetesStepDecorator):
    """Headless service through which TaskManagers reach the JobManager RPC and blob ports.

    With high availability the leader address is resolved through the HA
    services instead, so no service is created.
    """

    def __init__(self, parameters: KubernetesJobManagerParameters):
        self._parameters = parameters

    def build_accompanying_kubernetes_resources(self) -> list[Any]:
        if not self._parameters.is_internal_service_enabled:
            return []

        service = client.V1Service(
            api_version=constants.API_VERSION,
            kind='Service',
            metadata=client.V1ObjectMeta(
                name=get_internal_service_name(self._parameters.cluster_id),
                labels=self._parameters.common_labels,
            ),
            spec=client.V1ServiceSpec(
                cluster_ip='None',
                selector=self._parameters.selectors,
                ports=[
                    client.V1ServicePort(name=constants.JOB_MANAGER_RPC_PORT_NAME,
                                         port=self._parameters.rpc_port),
                    client.V1ServicePort(name=constants.BLOB_SERVER_PORT_NAME,
                                         port=self._parameters.blob_server_port),
                ],
            ),
        )

        return [service]
