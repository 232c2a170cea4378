import copy

from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.kubernetes_utils import get_container_envs, get_resource_requirements, get_tolerations
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters


class InitJobManagerDecorator(AbstractKubernetesStepDecorator):
    def __init__(self, parameters: KubernetesJobManagerParameters):
        if parameters is None:
            raise ValueError('JobManager parameters must not be None')

        self._parameters = parameters

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        pod = copy.deepcopy(flink_pod.pod)

        pod.api_version = constants.API_VERSION

        metadata = pod.metadata or client.V1ObjectMeta()
        metadata.labels = self._parameters.labels
        metadata.annotations = self._parameters.annotations
        pod.metadata = metadata

        host_network = self._parameters.is_host_network_enabled

        spec = pod.spec or client.V1PodSpec(containers=[])
        spec.service_account_name = self._parameters.service_account
        spec.restart_policy = constants.RESTART_POLICY_OF_ALWAYS
        spec.host_network = host_network
        spec.dns_policy = constants.DNS_POLICY_HOSTNETWORK if host_network else constants.DNS_POLICY_DEFAULT
        spec.image_pull_secrets = self._parameters.image_pull_secrets
        spec.node_selector = self._parameters.node_selector
        spec.tolerations = get_tolerations(self._parameters.tolerations)
        pod.spec = spec

        return FlinkPod(pod=pod, main_container=self._decorate_main_container(flink_pod.main_container))

    def _decorate_main_container(self, container: client.V1Container) -> client.V1Container:
        container = copy.deepcopy(container)

        container.name = self._parameters.job_manager_main_container_name
        container.image = self._parameters.image
        container.image_pull_policy = self._parameters.image_pull_policy
        container.resources = get_resource_requirements(
            self._parameters.job_manager_memory_mb,
            self._parameters.job_manager_memory_request_factor,
            self._parameters.job_manager_cpu,
            self._parameters.job_manager_cpu_request_factor,
        )
        container.ports = self._get_container_ports()
        container.env = get_container_envs(self._parameters.environments, self._parameters.cluster_id)

        return container

    def _get_container_ports(self) -> list[client.V1ContainerPort]:
        if self._parameters.is_host_network_enabled:
            return []

        return [
            client.V1ContainerPort(name=constants.REST_PORT_NAME, container_port=self._parameters.rest_bind_port),
            client.V1ContainerPort(name=constants.JOB_MANAGER_RPC_PORT_NAME,
                                   container_port=self._parameters.rpc_port),
            client.V1ContainerPort(name=constants.BLOB_SERVER_PORT_NAME,
                                   container_port=self._parameters.blob_server_port),
        ]
