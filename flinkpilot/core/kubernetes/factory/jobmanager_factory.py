from functools import reduce

from kubernetes import client

from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.decorators import (
    AbstractKubernetesStepDecorator,
    CmdJobManagerDecorator,
    EnvSecretsDecorator,
    ExternalServiceDecorator,
    FlinkConfMountDecorator,
    InitJobManagerDecorator,
    InternalServiceDecorator,
    MountSecretsDecorator,
)
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.jobmanager_specification import KubernetesJobManagerSpecification
from flinkpilot.core.kubernetes.kubernetes_utils import get_deployment_name
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters


class KubernetesJobManagerFactory:
    @staticmethod
    def get_step_decorators(parameters: KubernetesJobManagerParameters) -> list[AbstractKubernetesStepDecorator]:
        # The initializer must come first, later steps only add to the base pod it creates
        return [
            InitJobManagerDecorator(parameters),
            EnvSecretsDecorator(parameters),
            MountSecretsDecorator(parameters),
            CmdJobManagerDecorator(parameters),
            InternalServiceDecorator(parameters),
            ExternalServiceDecorator(parameters),
            FlinkConfMountDecorator(parameters),
        ]

    @classmethod
    def build_kubernetes_job_manager_specification(
        cls, parameters: KubernetesJobManagerParameters
    ) -> KubernetesJobManagerSpecification:
        steps = cls.get_step_decorators(parameters)

        flink_pod = reduce(lambda pod, step: step.decorate_flink_pod(pod), steps, FlinkPod())

        accompanying_resources = []
        for step in steps:
            accompanying_resources.extend(step.build_accompanying_kubernetes_resources())

        return KubernetesJobManagerSpecification(
            deployment=cls._create_job_manager_deployment(flink_pod, parameters),
            accompanying_resources=accompanying_resources,
        )

    @staticmethod
    def _create_job_manager_deployment(flink_pod: FlinkPod,
                                       parameters: KubernetesJobManagerParameters) -> client.V1Deployment:
        pod = flink_pod.copy().pod
        pod.spec.containers = [flink_pod.main_container, *pod.spec.containers]

        return client.V1Deployment(
            api_version=constants.APPS_API_VERSION,
            kind='Deployment',
            metadata=client.V1ObjectMeta(
                name=get_deployment_name(parameters.cluster_id),
                labels=parameters.labels,
            ),
            spec=client.V1DeploymentSpec(
                replicas=parameters.replicas,
                selector=client.V1LabelSelector(match_labels=parameters.selectors),
                template=client.V1PodTemplateSpec(metadata=pod.metadata, spec=pod.spec),
            ),
        )
