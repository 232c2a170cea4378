from flinkpilot.core.kubernetes.parameters.abstract_parameters import AbstractKubernetesParameters
from flinkpilot.core.kubernetes.parameters.jobmanager_parameters import KubernetesJobManagerParameters
from flinkpilot.core.kubernetes.parameters.taskmanager_parameters import KubernetesTaskManagerParameters

__all__ = ['AbstractKubernetesParameters', 'KubernetesJobManagerParameters', 'KubernetesTaskManagerParameters']
