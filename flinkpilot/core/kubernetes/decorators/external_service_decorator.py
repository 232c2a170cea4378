from typing import Any

from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.kubernetes_utils import get_rest_service_name
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters


class ExternalServiceDecorator(AbstractKubernetesStepDecorator):
    """Service exposing the JobManager REST endpoint, of the configured exposed type."""

    def __init__(self, parameters: KubernetesJobManagerParameters):
        self._parameters = parameters

    def build_accompanying_kubernetes_resources(self) -> list[Any]:
        service = client.V1Service(
            api_version=constants.API_VERSION,
            kind='Service',
            metadata=client.V1ObjectMeta(
                name=get_rest_service_name(self._parameters.cluster_id),
                labels=self._parameters.common_labels,
                annotations=self._parameters.rest_service_annotations,
            ),
            spec=client.V1ServiceSpec(
                type=self._parameters.rest_service_exposed_type.value,
                selector=self._parameters.selectors,
                ports=[
                    client.V1ServicePort(
                        name=constants.REST_PORT_NAME,
                        port=self._parameters.rest_port,
                        target_port=self._parameters.rest_bind_port,
                    )
                ],
            ),
        )

        return [service]
