from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.options import (
    ExternalResourceOptions,
    KubernetesConfigOptions,
    ResourceManagerOptions,
    TaskManagerOptions,
)
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import ClusterSpecification
from flinkpilot.core.kubernetes.kubernetes_utils import get_task_manager_selectors, is_fixed_port
from flinkpilot.core.kubernetes.parameters.abstract_parameters import AbstractKubernetesParameters


class KubernetesTaskManagerParameters(AbstractKubernetesParameters):
    def __init__(self, configuration: Configuration, pod_name: str, cluster_specification: ClusterSpecification,
                 dynamic_properties: str = ''):
        super().__init__(configuration)
        self._pod_name = pod_name
        self._cluster_specification = cluster_specification
        self._dynamic_properties = dynamic_properties

    @property
    def pod_name(self) -> str:
        return self._pod_name

    @property
    def dynamic_properties(self) -> str:
        return self._dynamic_properties

    @property
    def labels(self) -> dict[str, str]:
        labels = self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_LABELS)
        labels.update(get_task_manager_selectors(self.cluster_id))
        return labels

    @property
    def annotations(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_ANNOTATIONS)

    @property
    def node_selector(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_NODE_SELECTOR)

    @property
    def tolerations(self) -> list[dict[str, str]]:
        return self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_TOLERATIONS)

    @property
    def environments(self) -> dict[str, str]:
        return self._configuration.get_prefixed(ResourceManagerOptions.CONTAINERIZED_TASK_MANAGER_ENV_PREFIX)

    @property
    def service_account(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_SERVICE_ACCOUNT)

    @property
    def task_manager_main_container_name(self) -> str:
        return constants.MAIN_CONTAINER_NAME_TASK_MANAGER

    @property
    def task_manager_memory_mb(self) -> int:
        return self._cluster_specification.task_manager_memory_mb

    @property
    def task_manager_memory_request_factor(self) -> float:
        return self._get_request_factor(KubernetesConfigOptions.TASK_MANAGER_MEMORY_REQUEST_FACTOR)

    @property
    def task_manager_cpu(self) -> float:
        cpu = self._configuration.get(KubernetesConfigOptions.TASK_MANAGER_CPU)
        return cpu if cpu > 0 else float(self._cluster_specification.slots_per_task_manager)

    @property
    def task_manager_cpu_request_factor(self) -> float:
        return self._get_request_factor(KubernetesConfigOptions.TASK_MANAGER_CPU_REQUEST_FACTOR)

    @property
    def task_manager_external_resources(self) -> dict[str, int]:
        """Maps Kubernetes resource keys (e.g. nvidia.com/gpu) to amounts."""
        resources = {}

        for name in self._configuration.get(ExternalResourceOptions.EXTERNAL_RESOURCE_LIST):
            amount = self._configuration.get(ExternalResourceOptions.amount_option(name))
            config_key = self._configuration.get(ExternalResourceOptions.kubernetes_config_key_option(name))

            if amount is None or not config_key:
                continue
            if amount <= 0:
                raise ValueError(f'Amount of external resource {name} must be positive, got {amount}.')

            resources[config_key] = amount

        return resources

    @property
    def rpc_port(self) -> int:
        value = self._configuration.get(TaskManagerOptions.RPC_PORT)

        if not is_fixed_port(value):
            raise ValueError(f'{TaskManagerOptions.RPC_PORT.key} should not be 0 or a range, got "{value}".')

        return int(value)
