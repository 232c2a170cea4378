from pathlib import Path
from typing import Any

from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.kubernetes_utils import get_config_map_name
from flinkpilot.core.kubernetes.parameters import AbstractKubernetesParameters


class FlinkConfMountDecorator(AbstractKubernetesStepDecorator):
    """Ships flink-conf.yaml and the console logging config to the pods through a ConfigMap.

    Both components mount the ConfigMap, only the JobManager bundle creates it.
    """

    def __init__(self, parameters: AbstractKubernetesParameters):
        self._parameters = parameters

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        result = flink_pod.copy()

        volume = client.V1Volume(
            name=constants.FLINK_CONF_VOLUME,
            config_map=client.V1ConfigMapVolumeSource(
                name=get_config_map_name(self._parameters.cluster_id),
                items=[client.V1KeyToPath(key=x, path=x) for x in self._get_config_file_names()],
            ),
        )
        result.pod.spec.volumes = (result.pod.spec.volumes or []) + [volume]

        mount = client.V1VolumeMount(name=constants.FLINK_CONF_VOLUME,
                                     mount_path=self._parameters.flink_conf_dir_in_pod)
        result.main_container.volume_mounts = (result.main_container.volume_mounts or []) + [mount]

        return result

    def build_accompanying_kubernetes_resources(self) -> list[Any]:
        data = {constants.FLINK_CONF_FILENAME: self._get_flink_conf_content()}

        for file_name in self._get_config_file_names():
            if file_name != constants.FLINK_CONF_FILENAME:
                data[file_name] = Path(self._parameters.config_dir, file_name).read_text()

        config_map = client.V1ConfigMap(
            api_version=constants.API_VERSION,
            kind='ConfigMap',
            metadata=client.V1ObjectMeta(
                name=get_config_map_name(self._parameters.cluster_id),
                labels=self._parameters.common_labels,
            ),
            data=data,
        )

        return [config_map]

    def _get_config_file_names(self) -> list[str]:
        file_names = [constants.FLINK_CONF_FILENAME]

        if self._parameters.has_logback:
            file_names.append(constants.CONFIG_FILE_LOGBACK_NAME)
        if self._parameters.has_log4j:
            file_names.append(constants.CONFIG_FILE_LOG4J_NAME)

        return file_names

    def _get_flink_conf_content(self) -> str:
        # flink-conf.yaml is read line by line as "key: value", not as full YAML
        return ''.join(f'{k}: {v}\n' for k, v in self._parameters.cluster_side_properties.items())
