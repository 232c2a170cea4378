from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.kubernetes_utils import get_start_command_with_bash_wrapper
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters


class CmdJobManagerDecorator(AbstractKubernetesStepDecorator):
    def __init__(self, parameters: KubernetesJobManagerParameters):
        self._parameters = parameters

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        container = flink_pod.copy().main_container

        container.command = [self._parameters.container_entrypoint]
        container.args = get_start_command_with_bash_wrapper(
            f'{constants.KUBERNETES_JOB_MANAGER_SCRIPT_PATH} {self._parameters.deployment_target}'
        )

        return flink_pod.with_main_container(container)
