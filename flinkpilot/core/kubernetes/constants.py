API_VERSION = 'v1'
APPS_API_VERSION = 'apps/v1'

CONFIG_FILE_LOGBACK_NAME = 'logback-console.xml'
CONFIG_FILE_LOG4J_NAME = 'log4j-console.properties'
FLINK_CONF_FILENAME = 'flink-conf.yaml'

FLINK_CONF_VOLUME = 'flink-config-volume'
CONFIG_MAP_PREFIX = 'flink-config-'

MAIN_CONTAINER_NAME_JOB_MANAGER = 'flink-job-manager'
MAIN_CONTAINER_NAME_TASK_MANAGER = 'flink-task-manager'

# Fixed ports used when the configured value is a range or left to the OS
BLOB_SERVER_PORT = 6124
TASK_MANAGER_RPC_PORT = 6122
REST_PORT = 8081

JOB_MANAGER_RPC_PORT_NAME = 'jobmanager-rpc'
BLOB_SERVER_PORT_NAME = 'blobserver'
REST_PORT_NAME = 'rest'
TASK_MANAGER_RPC_PORT_NAME = 'taskmanager-rpc'

LABEL_TYPE_KEY = 'type'
LABEL_TYPE_NATIVE_TYPE = 'flink-native-kubernetes'
LABEL_APP_KEY = 'app'
LABEL_COMPONENT_KEY = 'component'
LABEL_COMPONENT_JOB_MANAGER = 'jobmanager'
LABEL_COMPONENT_TASK_MANAGER = 'taskmanager'

RESTART_POLICY_OF_NEVER = 'Never'
RESTART_POLICY_OF_ALWAYS = 'Always'

DNS_POLICY_DEFAULT = 'ClusterFirst'
DNS_POLICY_HOSTNETWORK = 'ClusterFirstWithHostNet'

ENV_FLINK_HOST_IP_ADDRESS = '_HOST_IP_ADDRESS'
ENV_FLINK_POD_IP_ADDRESS = '_POD_IP_ADDRESS'
ENV_CLUSTER_ID = 'CLUSTER_ID'
HOST_IP_FIELD_PATH = 'status.hostIP'
POD_IP_FIELD_PATH = 'status.podIP'

RESOURCE_NAME_MEMORY = 'memory'
RESOURCE_NAME_CPU = 'cpu'
RESOURCE_UNIT_MB = 'Mi'

KUBERNETES_JOB_MANAGER_SCRIPT_PATH = 'kubernetes-jobmanager.sh'
KUBERNETES_TASK_MANAGER_SCRIPT_PATH = 'kubernetes-taskmanager.sh'

SECRET_VOLUME_SUFFIX = '-volume'

PYTHON_DRIVER_ENTRY_POINT_CLASS = 'org.apache.flink.client.python.PythonDriver'
PYTHON_GATEWAY_CLASS_NAME = 'org.apache.flink.client.python.PythonGatewayServer'
PYTHON_PROGRAM_ARGUMENTS = ('-py', '--python', '-pym', '--pyModule')

SESSION_CLUSTER_ENTRYPOINT = 'org.apache.flink.kubernetes.entrypoint.KubernetesSessionClusterEntrypoint'
APPLICATION_CLUSTER_ENTRYPOINT = 'org.apache.flink.kubernetes.entrypoint.KubernetesApplicationClusterEntrypoint'
