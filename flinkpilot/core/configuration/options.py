from enum import StrEnum

from flinkpilot.core.configuration.config_option import (
    ConfigOption,
    to_bool,
    to_float,
    to_int,
    to_list,
    to_list_of_maps,
    to_map,
)
from flinkpilot.core.configuration.configuration import Configuration


class KubernetesDeploymentTarget(StrEnum):
    SESSION = 'kubernetes-session'
    APPLICATION = 'kubernetes-application'


class ServiceExposedType(StrEnum):
    CLUSTER_IP = 'ClusterIP'
    NODE_PORT = 'NodePort'
    LOAD_BALANCER = 'LoadBalancer'


class ImagePullPolicy(StrEnum):
    IF_NOT_PRESENT = 'IfNotPresent'
    ALWAYS = 'Always'
    NEVER = 'Never'


class ExecutionMode(StrEnum):
    NORMAL = 'NORMAL'
    DETACHED = 'DETACHED'


class DeploymentOptions:
    TARGET = ConfigOption('execution.target', description='The deployment target for the execution.')


class DeploymentOptionsInternal:
    CONF_DIR = ConfigOption('$internal.deployment.config-dir')


class PipelineOptions:
    JARS = ConfigOption('pipeline.jars', converter=to_list, description='Jars to ship to the cluster.')


class ApplicationOptions:
    APPLICATION_ARGS = ConfigOption('$internal.application.program-args', converter=to_list)
    APPLICATION_MAIN_CLASS = ConfigOption('$internal.application.main')


class ClusterEntrypointOptions:
    EXECUTION_MODE = ConfigOption('internal.cluster.execution-mode', default=ExecutionMode.NORMAL.value)


class BlobServerOptions:
    PORT = ConfigOption('blob.server.port', default='0')


class JobManagerOptions:
    ADDRESS = ConfigOption('jobmanager.rpc.address')
    PORT = ConfigOption('jobmanager.rpc.port', default=6123, converter=to_int)


class TaskManagerOptions:
    RPC_PORT = ConfigOption('taskmanager.rpc.port', default='0')


class RestOptions:
    ADDRESS = ConfigOption('rest.address')
    PORT = ConfigOption('rest.port', default=8081, converter=to_int)
    BIND_PORT = ConfigOption('rest.bind-port', fallback_keys=('rest.port',))
    CONNECTION_TIMEOUT = ConfigOption('rest.connection-timeout', default=15000, converter=to_int,
                                      description='Timeout in milliseconds for the REST client.')


class HighAvailabilityOptions:
    HA_MODE = ConfigOption('high-availability', default='NONE')
    HA_CLUSTER_ID = ConfigOption('high-availability.cluster-id', default='/default')
    HA_JOB_MANAGER_PORT_RANGE = ConfigOption('high-availability.jobmanager.port', default='0')


class ResourceManagerOptions:
    CONTAINERIZED_MASTER_ENV_PREFIX = 'containerized.master.env.'
    CONTAINERIZED_TASK_MANAGER_ENV_PREFIX = 'containerized.taskmanager.env.'


class ExternalResourceOptions:
    EXTERNAL_RESOURCE_LIST = ConfigOption('external-resources', default=[], converter=to_list)

    @staticmethod
    def amount_option(resource_name: str) -> ConfigOption:
        return ConfigOption(f'external-resource.{resource_name}.amount', converter=to_int)

    @staticmethod
    def kubernetes_config_key_option(resource_name: str) -> ConfigOption:
        return ConfigOption(f'external-resource.{resource_name}.kubernetes.config-key')


class KubernetesConfigOptions:
    CLUSTER_ID = ConfigOption('kubernetes.cluster-id', description='The cluster-id, used to identify a cluster.')
    NAMESPACE = ConfigOption('kubernetes.namespace', default='default')
    KUBE_CONFIG_FILE = ConfigOption('kubernetes.config.file')

    CONTAINER_IMAGE = ConfigOption('kubernetes.container.image', default='apache/flink:1.12.0-scala_2.11')
    CONTAINER_IMAGE_PULL_POLICY = ConfigOption('kubernetes.container.image.pull-policy',
                                               default=ImagePullPolicy.IF_NOT_PRESENT.value)
    CONTAINER_IMAGE_PULL_SECRETS = ConfigOption('kubernetes.container.image.pull-secrets', default=[],
                                                converter=to_list)

    KUBERNETES_SERVICE_ACCOUNT = ConfigOption('kubernetes.service-account', default='default')
    JOB_MANAGER_SERVICE_ACCOUNT = ConfigOption('kubernetes.jobmanager.service-account', default='default',
                                               fallback_keys=('kubernetes.service-account',))
    TASK_MANAGER_SERVICE_ACCOUNT = ConfigOption('kubernetes.taskmanager.service-account', default='default',
                                                fallback_keys=('kubernetes.service-account',))

    JOB_MANAGER_LABELS = ConfigOption('kubernetes.jobmanager.labels', default={}, converter=to_map)
    TASK_MANAGER_LABELS = ConfigOption('kubernetes.taskmanager.labels', default={}, converter=to_map)
    JOB_MANAGER_ANNOTATIONS = ConfigOption('kubernetes.jobmanager.annotations', default={}, converter=to_map)
    TASK_MANAGER_ANNOTATIONS = ConfigOption('kubernetes.taskmanager.annotations', default={}, converter=to_map)
    JOB_MANAGER_NODE_SELECTOR = ConfigOption('kubernetes.jobmanager.node-selector', default={}, converter=to_map)
    TASK_MANAGER_NODE_SELECTOR = ConfigOption('kubernetes.taskmanager.node-selector', default={}, converter=to_map)
    JOB_MANAGER_TOLERATIONS = ConfigOption('kubernetes.jobmanager.tolerations', default=[],
                                           converter=to_list_of_maps)
    TASK_MANAGER_TOLERATIONS = ConfigOption('kubernetes.taskmanager.tolerations', default=[],
                                            converter=to_list_of_maps)

    JOB_MANAGER_CPU = ConfigOption('kubernetes.jobmanager.cpu', default=1.0, converter=to_float)
    JOB_MANAGER_CPU_REQUEST_FACTOR = ConfigOption('kubernetes.jobmanager.cpu.request-factor', default=1.0,
                                                  converter=to_float)
    JOB_MANAGER_MEMORY_REQUEST_FACTOR = ConfigOption('kubernetes.jobmanager.memory.request-factor', default=1.0,
                                                     converter=to_float)
    # -1 means "use the number of task slots"
    TASK_MANAGER_CPU = ConfigOption('kubernetes.taskmanager.cpu', default=-1.0, converter=to_float)
    TASK_MANAGER_CPU_REQUEST_FACTOR = ConfigOption('kubernetes.taskmanager.cpu.request-factor', default=1.0,
                                                   converter=to_float)
    TASK_MANAGER_MEMORY_REQUEST_FACTOR = ConfigOption('kubernetes.taskmanager.memory.request-factor', default=1.0,
                                                      converter=to_float)

    KUBERNETES_JOBMANAGER_REPLICAS = ConfigOption('kubernetes.jobmanager.replicas', default=1, converter=to_int)
    KUBERNETES_HOSTNETWORK_ENABLED = ConfigOption('kubernetes.hostnetwork.enabled', default=False,
                                                  converter=to_bool)

    REST_SERVICE_EXPOSED_TYPE = ConfigOption('kubernetes.rest-service.exposed.type',
                                             default=ServiceExposedType.LOAD_BALANCER.value)
    REST_SERVICE_ANNOTATIONS = ConfigOption('kubernetes.rest-service.annotations', default={}, converter=to_map)

    KUBERNETES_ENTRY_PATH = ConfigOption('kubernetes.entry.path', default='/docker-entrypoint.sh')
    FLINK_CONF_DIR = ConfigOption('kubernetes.flink.conf.dir', default='/opt/flink/conf')

    # secret-name:mount-path
    KUBERNETES_SECRETS = ConfigOption('kubernetes.secrets', default={}, converter=to_map)
    # env:NAME,secret:secret-name,key:secret-key
    KUBERNETES_ENV_SECRET_KEY_REF = ConfigOption('kubernetes.env.secretKeyRef', default=[],
                                                 converter=to_list_of_maps)


class KubernetesConfigOptionsInternal:
    ENTRY_POINT_CLASS = ConfigOption('kubernetes.internal.entrypoint.class')


def is_high_availability_mode_activated(configuration: Configuration) -> bool:
    return str(configuration.get(HighAvailabilityOptions.HA_MODE)).upper() != 'NONE'
