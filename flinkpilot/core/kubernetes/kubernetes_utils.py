import re
from pathlib import Path
from urllib.parse import urlparse

from kubernetes import client

from flinkpilot.core.configuration import ConfigOption, Configuration
from flinkpilot.core.configuration.options import PipelineOptions
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.utils import setup_logger

_logger = setup_logger('KubernetesUtils')

_PORT_RANGE_PATTERN = re.compile(r'[-,]')


def is_fixed_port(value) -> bool:
    if value is None:
        return False

    value = str(value).strip()
    if not value or _PORT_RANGE_PATTERN.search(value):
        return False

    try:
        return int(value) > 0
    except ValueError as e:
        raise ValueError(f'Port value "{value}" is neither a fixed port, a range nor a list of ports') from e


def check_and_update_port_config_option(configuration: Configuration, option: ConfigOption, fallback_port: int) -> None:
    """Pins a port option to `fallback_port` if it is unset, 0, a range or a list.

    Kubernetes services need a deterministic set of container ports to route to.
    """
    if not is_fixed_port(configuration.get(option)):
        configuration.set(option, str(fallback_port))
        _logger.info(f'Kubernetes deployment requires a fixed port. Configuration {option.key} will be set to {fallback_port}')


def get_resource_requirements(memory_mb: int, memory_request_factor: float, cpu: float, cpu_request_factor: float,
                              external_resources: dict[str, int] | None = None) -> client.V1ResourceRequirements:
    """Limit is the configured ceiling, request is `limit * factor`.

    Memory requests are truncated to whole MiB. Extended resources cannot be
    overcommitted, so their request always equals their limit.
    """
    limits = {
        constants.RESOURCE_NAME_MEMORY: f'{memory_mb}{constants.RESOURCE_UNIT_MB}',
        constants.RESOURCE_NAME_CPU: str(cpu),
    }
    requests = {
        constants.RESOURCE_NAME_MEMORY: f'{int(memory_mb * memory_request_factor)}{constants.RESOURCE_UNIT_MB}',
        constants.RESOURCE_NAME_CPU: str(cpu * cpu_request_factor),
    }

    for resource_key, amount in (external_resources or {}).items():
        limits[resource_key] = str(amount)
        requests[resource_key] = str(amount)

    return client.V1ResourceRequirements(limits=limits, requests=requests)


def check_jar_file_for_application_mode(configuration: Configuration) -> list[Path]:
    jars = []

    for jar in configuration.get(PipelineOptions.JARS) or []:
        parsed = urlparse(jar)
        if parsed.scheme != 'local':
            raise ValueError(f'Only "local" is supported as schema for application mode. '
                             f'This assumes that the jar is located in the image, not the Flink client. '
                             f'An example of such path is: local:///opt/flink/examples/streaming/WindowJoin.jar, got {jar}')
        jars.append(Path(parsed.path))

    return jars


def is_python_program(entry_point_class_name: str | None, program_arguments: list[str] | None) -> bool:
    if entry_point_class_name in (constants.PYTHON_DRIVER_ENTRY_POINT_CLASS, constants.PYTHON_GATEWAY_CLASS_NAME):
        return True

    return any(arg in constants.PYTHON_PROGRAM_ARGUMENTS for arg in program_arguments or [])


def get_common_labels(cluster_id: str) -> dict[str, str]:
    return {
        constants.LABEL_TYPE_KEY: constants.LABEL_TYPE_NATIVE_TYPE,
        constants.LABEL_APP_KEY: cluster_id,
    }


def get_job_manager_selectors(cluster_id: str) -> dict[str, str]:
    return {**get_common_labels(cluster_id), constants.LABEL_COMPONENT_KEY: constants.LABEL_COMPONENT_JOB_MANAGER}


def get_task_manager_selectors(cluster_id: str) -> dict[str, str]:
    return {**get_common_labels(cluster_id), constants.LABEL_COMPONENT_KEY: constants.LABEL_COMPONENT_TASK_MANAGER}


def get_config_map_name(cluster_id: str) -> str:
    return f'{constants.CONFIG_MAP_PREFIX}{cluster_id}'


def get_internal_service_name(cluster_id: str) -> str:
    return cluster_id


def get_rest_service_name(cluster_id: str) -> str:
    return f'{cluster_id}-rest'


def get_deployment_name(cluster_id: str) -> str:
    return cluster_id


def get_start_command_with_bash_wrapper(command: str) -> list[str]:
    return ['bash', '-c', command]


def get_tolerations(tolerations: list[dict[str, str]]) -> list[client.V1Toleration]:
    result = []
    for toleration in tolerations:
        toleration_seconds = toleration.get('tolerationSeconds')
        result.append(client.V1Toleration(
            key=toleration.get('key'),
            operator=toleration.get('operator'),
            value=toleration.get('value'),
            effect=toleration.get('effect'),
            toleration_seconds=int(toleration_seconds) if toleration_seconds is not None else None,
        ))
    return result


def get_namespaced_service_name(service_name: str, namespace: str) -> str:
    return f'{service_name}.{namespace}'


def get_container_envs(environments: dict[str, str], cluster_id: str) -> list[client.V1EnvVar]:
    """User supplied variables in mapping order, followed by the host IP, pod IP and cluster id.

    The injected entries come last so that user variables cannot shadow them.
    """
    envs = [client.V1EnvVar(name=k, value=v) for k, v in environments.items()]

    envs.append(client.V1EnvVar(
        name=constants.ENV_FLINK_HOST_IP_ADDRESS,
        value_from=client.V1EnvVarSource(
            field_ref=client.V1ObjectFieldSelector(api_version=constants.API_VERSION,
                                                   field_path=constants.HOST_IP_FIELD_PATH)
        ),
    ))
    envs.append(client.V1EnvVar(
        name=constants.ENV_FLINK_POD_IP_ADDRESS,
        value_from=client.V1EnvVarSource(
            field_ref=client.V1ObjectFieldSelector(api_version=constants.API_VERSION,
                                                   field_path=constants.POD_IP_FIELD_PATH)
        ),
    ))
    envs.append(client.V1EnvVar(name=constants.ENV_CLUSTER_ID, value=cluster_id))

    return envs
