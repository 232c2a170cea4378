import pytest

from kubernetes import client

from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.options import (
    BlobServerOptions,
    DeploymentOptionsInternal,
    KubernetesConfigOptions,
    KubernetesConfigOptionsInternal,
    RestOptions,
    TaskManagerOptions,
)
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import ClusterSpecification, Endpoint
from flinkpilot.core.kubernetes.jobmanager_specification import KubernetesJobManagerSpecification
from flinkpilot.core.kubernetes.kube_client import FlinkKubeClient, ServiceType
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters, KubernetesTaskManagerParameters


class FakeFlinkKubeClient(FlinkKubeClient):
    """In-memory kube client which records every call the descriptor makes."""

    def __init__(self):
        self.calls: list[str] = []
        self.handled_exceptions: list[Exception] = []
        self.created_specifications: list[KubernetesJobManagerSpecification] = []
        self.services: dict[str, client.V1Service] = {}

        self.rest_endpoint: Endpoint | None = None
        self.endpoint_error: Exception | None = None
        self.create_error: Exception | None = None
        self.cleanup_error: Exception | None = None
        self.close_error: Exception | None = None

    def create_job_manager_component(self, specification: KubernetesJobManagerSpecification) -> None:
        self.calls.append('create_job_manager_component')
        if self.create_error:
            raise self.create_error

        self.created_specifications.append(specification)
        for resource in specification.accompanying_resources:
            if isinstance(resource, client.V1Service):
                self.services[resource.metadata.name] = resource

    def create_task_manager_pod(self, pod: client.V1Pod) -> None:
        self.calls.append('create_task_manager_pod')

    def stop_pod(self, pod_name: str) -> None:
        self.calls.append('stop_pod')

    def stop_and_cleanup_cluster(self, cluster_id: str) -> None:
        self.calls.append('stop_and_cleanup_cluster')
        if self.cleanup_error:
            raise self.cleanup_error

        self.services.clear()

    def get_rest_endpoint(self, cluster_id: str) -> Endpoint | None:
        self.calls.append('get_rest_endpoint')
        if self.endpoint_error:
            raise self.endpoint_error

        return self.rest_endpoint

    def get_service(self, service_type: ServiceType, cluster_id: str) -> client.V1Service | None:
        self.calls.append('get_service')
        return self.services.get(service_type.service_name(cluster_id))

    def handle_exception(self, exception: Exception) -> None:
        self.handled_exceptions.append(exception)

    def close(self) -> None:
        self.calls.append('close')
        if self.close_error:
            raise self.close_error

    def count(self, call: str) -> int:
        return self.calls.count(call)


@pytest.fixture
def configuration(tmp_path) -> Configuration:
    return Configuration.from_dict({
        KubernetesConfigOptions.CLUSTER_ID.key: 'flink-test',
        DeploymentOptionsInternal.CONF_DIR.key: str(tmp_path),
    })


@pytest.fixture
def cluster_specification() -> ClusterSpecification:
    return ClusterSpecification(master_memory_mb=1024, task_manager_memory_mb=2048, slots_per_task_manager=2)


@pytest.fixture
def job_manager_parameters(configuration, cluster_specification) -> KubernetesJobManagerParameters:
    configuration.set(BlobServerOptions.PORT, '6124')
    configuration.set(RestOptions.BIND_PORT, '8081')
    configuration.set(KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS, constants.SESSION_CLUSTER_ENTRYPOINT)

    return KubernetesJobManagerParameters(configuration, cluster_specification)


@pytest.fixture
def task_manager_parameters(configuration, cluster_specification) -> KubernetesTaskManagerParameters:
    configuration.set(TaskManagerOptions.RPC_PORT, '6122')

    return KubernetesTaskManagerParameters(
        configuration,
        'flink-test-taskmanager-1-1',
        cluster_specification,
        '-Dtaskmanager.resource-id=flink-test-taskmanager-1-1',
    )


@pytest.fixture
def kube_client() -> FakeFlinkKubeClient:
    return FakeFlinkKubeClient()
