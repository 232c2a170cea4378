from abc import ABC
from typing import Any

from flinkpilot.core.kubernetes.flink_pod import FlinkPod


class AbstractKubernetesStepDecorator(ABC):
    """One step of the pod specification pipeline.

    A step receives the current FlinkPod and returns a new one, it never
    mutates its input and never talks to the API server. Steps which need
    extra resources next to the pod (services, config maps) return them from
    `build_accompanying_kubernetes_resources`.
    """

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        return flink_pod

    def build_accompanying_kubernetes_resources(self) -> list[Any]:
        return []

    def __repr__(self) -> str:
        return self.__class__.__name__
