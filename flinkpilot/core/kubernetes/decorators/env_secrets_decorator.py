from kubernetes import client

from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.flink_pod import FlinkPod
from flinkpilot.core.kubernetes.parameters import AbstractKubernetesParameters


class EnvSecretsDecorator(AbstractKubernetesStepDecorator):
    """Exposes secret keys as environment variables of the main container.

    Secret variables are put in front of the existing ones so the variables
    injected by the initializer stay last and keep precedence.
    """

    def __init__(self, parameters: AbstractKubernetesParameters):
        self._parameters = parameters

    def decorate_flink_pod(self, flink_pod: FlinkPod) -> FlinkPod:
        secret_refs = self._parameters.env_from_secrets
        if not secret_refs:
            return flink_pod

        container = flink_pod.copy().main_container
        container.env = [self._build_env(x) for x in secret_refs] + (container.env or [])

        return flink_pod.with_main_container(container)

    @staticmethod
    def _build_env(secret_ref: dict[str, str]) -> client.V1EnvVar:
        missing = [k for k in ('env', 'secret', 'key') if not secret_ref.get(k)]
        if missing:
            raise ValueError(f'Secret key reference {secret_ref} is missing {missing}')

        return client.V1EnvVar(
            name=secret_ref['env'],
            value_from=client.V1EnvVarSource(
                secret_key_ref=client.V1SecretKeySelector(name=secret_ref['secret'], key=secret_ref['key'])
            ),
        )
