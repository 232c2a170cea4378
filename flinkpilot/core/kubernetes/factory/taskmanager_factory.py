from functools import reduce

from kubernetes import client

from flinkpilot.core.kubernetes.decorators import (
    AbstractKubernetesStepDecorator,
    CmdTaskManagerDecorator,
    EnvSecretsDecorator,
    FlinkConfMountDecorator,
    InitTaskManagerDecorator,
    MountSecretsDecorator,
)
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.parameters import KubernetesTaskManagerParameters


class KubernetesTaskManagerFactory:
    @staticmethod
    def get_step_decorators(parameters: KubernetesTaskManagerParameters) -> list[AbstractKubernetesStepDecorator]:
        return [
            InitTaskManagerDecorator(parameters),
            EnvSecretsDecorator(parameters),
            MountSecretsDecorator(parameters),
            CmdTaskManagerDecorator(parameters),
            FlinkConfMountDecorator(parameters),
        ]

    @classmethod
    def build_task_manager_kubernetes_pod(cls, parameters: KubernetesTaskManagerParameters) -> client.V1Pod:
        flink_pod = reduce(lambda pod, step: step.decorate_flink_pod(pod), cls.get_step_decorators(parameters),
                           FlinkPod())

        pod = flink_pod.copy().pod
        pod.spec.containers = [flink_pod.main_container, *pod.spec.containers]

        return pod
