from flinkpilot.core.kubernetes.factory.jobmanager_factory import KubernetesJobManagerFactory
from flinkpilot.core.kubernetes.factory.taskmanager_factory import KubernetesTaskManagerFactory

__all__ = ['KubernetesJobManagerFactory', 'KubernetesTaskManagerFactory']
