from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.parameters import AbstractKubernetesParameters


class MountSecretsDecorator(AbstractKubernetesStepDecorator):
    """Mounts user secrets as volumes into the main container."""

    def __init__(self, parameters: AbstractKubernetesParameters):
        self._parameters = parameters

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        secrets = self._parameters.secret_names_to_mount_paths
        if not secrets:
            return flink_pod

        result = flink_pod.copy()

        volumes = [
            client.V1Volume(name=self._volume_name(name), secret=client.V1SecretVolumeSource(secret_name=name))
            for name in secrets
        ]
        result.pod.spec.volumes = (result.pod.spec.volumes or []) + volumes

        mounts = [
            client.V1VolumeMount(name=self._volume_name(name), mount_path=path)
            for name, path in secrets.items()
        ]
        result.main_container.volume_mounts = (result.main_container.volume_mounts or []) + mounts

        return result

    @staticmethod
    def _volume_name(secret_name: str) -> str:
        return f'{secret_name}{constants.SECRET_VOLUME_SUFFIX}'
