from flinkpilot.core.configuration import ConfigOption, Configuration
from flinkpilot.core.configuration.options import (
    BlobServerOptions,
    JobManagerOptions,
    KubernetesConfigOptions,
    KubernetesConfigOptionsInternal,
    KubernetesDeploymentTarget,
    ResourceManagerOptions,
    RestOptions,
    ServiceExposedType,
    is_high_availability_mode_activated,
)
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import ClusterSpecification
from flinkpilot.core.kubernetes.kubernetes_utils import (
    get_internal_service_name,
    get_job_manager_selectors,
    get_namespaced_service_name,
    is_fixed_port,
)
from flinkpilot.core.kubernetes.parameters.abstract_parameters import AbstractKubernetesParameters


class KubernetesJobManagerParameters(AbstractKubernetesParameters):
    def __init__(self, configuration: Configuration, cluster_specification: ClusterSpecification):
        super().__init__(configuration)
        self._cluster_specification = cluster_specification

    @property
    def labels(self) -> dict[str, str]:
        labels = self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_LABELS)
        labels.update(self.selectors)
        return labels

    @property
    def selectors(self) -> dict[str, str]:
        return get_job_manager_selectors(self.cluster_id)

    @property
    def annotations(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_ANNOTATIONS)

    @property
    def node_selector(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_NODE_SELECTOR)

    @property
    def tolerations(self) -> list[dict[str, str]]:
        return self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_TOLERATIONS)

    @property
    def environments(self) -> dict[str, str]:
        return self._configuration.get_prefixed(ResourceManagerOptions.CONTAINERIZED_MASTER_ENV_PREFIX)

    @property
    def service_account(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_SERVICE_ACCOUNT)

    @property
    def job_manager_main_container_name(self) -> str:
        return constants.MAIN_CONTAINER_NAME_JOB_MANAGER

    @property
    def job_manager_memory_mb(self) -> int:
        return self._cluster_specification.master_memory_mb

    @property
    def job_manager_memory_request_factor(self) -> float:
        return self._get_request_factor(KubernetesConfigOptions.JOB_MANAGER_MEMORY_REQUEST_FACTOR)

    @property
    def job_manager_cpu(self) -> float:
        return self._configuration.get(KubernetesConfigOptions.JOB_MANAGER_CPU)

    @property
    def job_manager_cpu_request_factor(self) -> float:
        return self._get_request_factor(KubernetesConfigOptions.JOB_MANAGER_CPU_REQUEST_FACTOR)

    @property
    def rest_port(self) -> int:
        return self._configuration.get(RestOptions.PORT)

    @property
    def rest_bind_port(self) -> int:
        return self._get_fixed_port(RestOptions.BIND_PORT)

    @property
    def rpc_port(self) -> int:
        return self._configuration.get(JobManagerOptions.PORT)

    @property
    def blob_server_port(self) -> int:
        return self._get_fixed_port(BlobServerOptions.PORT)

    def _get_fixed_port(self, option: ConfigOption) -> int:
        value = self._configuration.get(option)

        if not is_fixed_port(value):
            raise ValueError(f'{option.key} should be specified to a fixed port, got "{value}".')

        return int(value)

    @property
    def rest_service_exposed_type(self) -> ServiceExposedType:
        return ServiceExposedType(self._configuration.get(KubernetesConfigOptions.REST_SERVICE_EXPOSED_TYPE))

    @property
    def rest_service_annotations(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.REST_SERVICE_ANNOTATIONS)

    @property
    def replicas(self) -> int:
        replicas = self._configuration.get(KubernetesConfigOptions.KUBERNETES_JOBMANAGER_REPLICAS)

        if replicas < 1:
            raise ValueError(f'{KubernetesConfigOptions.KUBERNETES_JOBMANAGER_REPLICAS.key} should be at least 1.')
        if replicas > 1 and not is_high_availability_mode_activated(self._configuration):
            raise ValueError('High availability should be enabled when starting standby JobManagers.')

        return replicas

    @property
    def is_internal_service_enabled(self) -> bool:
        return not is_high_availability_mode_activated(self._configuration)

    @property
    def entrypoint_class(self) -> str:
        entrypoint_class = self._configuration.get(KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS)

        if not entrypoint_class:
            raise ValueError(f'{KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS.key} must be specified!')

        return entrypoint_class

    @property
    def deployment_target(self) -> KubernetesDeploymentTarget:
        if self.entrypoint_class == constants.APPLICATION_CLUSTER_ENTRYPOINT:
            return KubernetesDeploymentTarget.APPLICATION
        return KubernetesDeploymentTarget.SESSION

    @property
    def cluster_side_properties(self) -> dict[str, str]:
        properties = super().cluster_side_properties

        if self.is_internal_service_enabled:
            properties[JobManagerOptions.ADDRESS.key] = get_namespaced_service_name(
                get_internal_service_name(self.cluster_id), self.namespace
            )

        return properties
