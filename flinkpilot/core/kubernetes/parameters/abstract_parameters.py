from abc import ABC, abstractmethod
from pathlib import Path

from kubernetes import client

from flinkpilot.core import config
from flinkpilot.core.configuration import ConfigOption, Configuration
from flinkpilot.core.configuration.options import DeploymentOptionsInternal, KubernetesConfigOptions
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.kubernetes_utils import get_common_labels


class AbstractKubernetesParameters(ABC):
    """Read-only view over a Configuration shared by JobManager and TaskManager parameters."""

    def __init__(self, configuration: Configuration):
        self._configuration = configuration

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def cluster_id(self) -> str:
        cluster_id = self._configuration.get(KubernetesConfigOptions.CLUSTER_ID)

        if not cluster_id:
            raise ValueError(f'{KubernetesConfigOptions.CLUSTER_ID.key} must not be blank.')
        if len(cluster_id) > 45:
            raise ValueError(f'{KubernetesConfigOptions.CLUSTER_ID.key} must be no more than 45 characters, '
                             f'got "{cluster_id}".')

        return cluster_id

    @property
    def namespace(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.NAMESPACE)

    @property
    def image(self) -> str:
        image = self._configuration.get(KubernetesConfigOptions.CONTAINER_IMAGE)

        if not image:
            raise ValueError(f'{KubernetesConfigOptions.CONTAINER_IMAGE.key} must not be blank.')

        return image

    @property
    def image_pull_policy(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.CONTAINER_IMAGE_PULL_POLICY)

    @property
    def image_pull_secrets(self) -> list[client.V1LocalObjectReference]:
        secrets = self._configuration.get(KubernetesConfigOptions.CONTAINER_IMAGE_PULL_SECRETS)
        return [client.V1LocalObjectReference(name=x) for x in secrets]

    @property
    def common_labels(self) -> dict[str, str]:
        return get_common_labels(self.cluster_id)

    @property
    def is_host_network_enabled(self) -> bool:
        return self._configuration.get(KubernetesConfigOptions.KUBERNETES_HOSTNETWORK_ENABLED)

    @property
    def flink_conf_dir_in_pod(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.FLINK_CONF_DIR)

    @property
    def container_entrypoint(self) -> str:
        return self._configuration.get(KubernetesConfigOptions.KUBERNETES_ENTRY_PATH)

    @property
    def config_dir(self) -> Path | None:
        conf_dir = self._configuration.get(DeploymentOptionsInternal.CONF_DIR) or config.FLINK_CONF_DIR
        return Path(conf_dir) if conf_dir else None

    @property
    def has_logback(self) -> bool:
        return self._has_local_file(constants.CONFIG_FILE_LOGBACK_NAME)

    @property
    def has_log4j(self) -> bool:
        return self._has_local_file(constants.CONFIG_FILE_LOG4J_NAME)

    def _has_local_file(self, file_name: str) -> bool:
        return self.config_dir is not None and Path(self.config_dir, file_name).exists()

    @property
    def secret_names_to_mount_paths(self) -> dict[str, str]:
        return self._configuration.get(KubernetesConfigOptions.KUBERNETES_SECRETS)

    @property
    def env_from_secrets(self) -> list[dict[str, str]]:
        return self._configuration.get(KubernetesConfigOptions.KUBERNETES_ENV_SECRET_KEY_REF)

    def _get_request_factor(self, option: ConfigOption) -> float:
        factor = self._configuration.get(option)

        if not 0 < factor <= 1:
            raise ValueError(f'{option.key} must be in range (0, 1], got {factor}.')

        return factor

    @property
    @abstractmethod
    def labels(self) -> dict[str, str]: ...

    @property
    @abstractmethod
    def annotations(self) -> dict[str, str]: ...

    @property
    @abstractmethod
    def node_selector(self) -> dict[str, str]: ...

    @property
    @abstractmethod
    def tolerations(self) -> list[dict[str, str]]: ...

    @property
    @abstractmethod
    def environments(self) -> dict[str, str]: ...

    @property
    @abstractmethod
    def service_account(self) -> str: ...

    @property
    def cluster_side_properties(self) -> dict[str, str]:
        """Options shipped to the pods as flink-conf.yaml, without client-only keys."""
        properties = self._configuration.to_string_map()

        for option in (KubernetesConfigOptions.KUBE_CONFIG_FILE, DeploymentOptionsInternal.CONF_DIR):
            properties.pop(option.key, None)

        return properties
