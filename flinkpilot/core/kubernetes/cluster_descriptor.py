from types import TracebackType
from typing import Any

from flinkpilot.core.client import ClusterClientProvider, RestClusterClient
from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.application_configuration import ApplicationConfiguration
from flinkpilot.core.configuration.options import (
    BlobServerOptions,
    ClusterEntrypointOptions,
    DeploymentOptions,
    ExecutionMode,
    HighAvailabilityOptions,
    JobManagerOptions,
    KubernetesConfigOptions,
    KubernetesConfigOptionsInternal,
    KubernetesDeploymentTarget,
    RestOptions,
    ServiceExposedType,
    TaskManagerOptions,
    is_high_availability_mode_activated,
)
from flinkpilot.core.exceptions import (
    ArtifactCountInvalidError,
    ClusterAlreadyExistsError,
    ClusterCloseError,
    ClusterDeploymentError,
    ClusterDeploymentFailedError,
    ClusterKillError,
    ClusterRetrieveError,
    DeploymentTargetMismatchError,
    EndpointUnavailableError,
    UnsupportedDeploymentModeError,
)
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import ClusterSpecification
from flinkpilot.core.kubernetes.factory import KubernetesJobManagerFactory
from flinkpilot.core.kubernetes.kube_client import FlinkKubeClient, ServiceType
from flinkpilot.core.kubernetes.kubernetes_utils import (
    check_and_update_port_config_option,
    check_jar_file_for_application_mode,
    is_python_program,
)
from flinkpilot.core.kubernetes.parameters import KubernetesJobManagerParameters
from flinkpilot.core.utils import setup_logger


class KubernetesClusterDescriptor:
    """Deploys, retrieves and kills Flink clusters running natively on Kubernetes.

    The descriptor keeps its own copy of the configuration and every deployment
    works on a further copy, so options pinned during one deployment never leak
    into another. Deployments of the same cluster id are not serialized here;
    the API server rejects the second JobManager deployment with a conflict.
    """

    CLUSTER_DESCRIPTION = 'Kubernetes cluster'

    def __init__(self, configuration: Configuration, kube_client: FlinkKubeClient):
        self._logger = setup_logger('KubernetesClusterDescriptor')

        self._configuration = configuration.copy()
        self._client = kube_client

        cluster_id = self._configuration.get(KubernetesConfigOptions.CLUSTER_ID)
        if not cluster_id:
            raise ValueError('ClusterId must be specified!')

        self._cluster_id = cluster_id

    @property
    def cluster_id(self) -> str:
        return self._cluster_id

    def get_cluster_description(self) -> str:
        return self.CLUSTER_DESCRIPTION

    def _create_cluster_client_provider(self, configuration: Configuration, cluster_id: str) -> ClusterClientProvider:
        def get_cluster_client() -> RestClusterClient:
            client_configuration = configuration.copy()

            try:
                endpoint = self._client.get_rest_endpoint(cluster_id)
            except Exception as e:
                self._client.handle_exception(e)
                raise ClusterRetrieveError(f'Could not get the rest endpoint of {cluster_id}.', cluster_id,
                                           'retrieve') from e

            if endpoint is None:
                raise EndpointUnavailableError(cluster_id)

            client_configuration.set(RestOptions.ADDRESS, endpoint.address)
            client_configuration.set(RestOptions.PORT, endpoint.port)

            if client_configuration.get(KubernetesConfigOptions.REST_SERVICE_EXPOSED_TYPE) == ServiceExposedType.CLUSTER_IP:
                self._logger.warning(
                    'Please note that Flink client operations (e.g. cancel, list, stop, savepoint, etc.) '
                    'won\'t work from outside the Kubernetes cluster since '
                    f'{KubernetesConfigOptions.REST_SERVICE_EXPOSED_TYPE.key} has been set to '
                    f'{ServiceExposedType.CLUSTER_IP}.'
                )

            try:
                return RestClusterClient(client_configuration, cluster_id)
            except Exception as e:
                self._client.handle_exception(e)
                raise ClusterRetrieveError('Could not create the RestClusterClient.', cluster_id, 'retrieve') from e

        return get_cluster_client

    def retrieve(self, cluster_id: str) -> ClusterClientProvider:
        cluster_client_provider = self._create_cluster_client_provider(self._configuration, cluster_id)

        with cluster_client_provider() as cluster_client:
            self._logger.info(f'Retrieve flink cluster {cluster_id} successfully, '
                              f'JobManager Web Interface: {cluster_client.get_web_interface_url()}')

        return cluster_client_provider

    def deploy_session_cluster(self, cluster_specification: ClusterSpecification) -> ClusterClientProvider:
        cluster_client_provider = self._deploy_cluster_internal(
            self._configuration.copy(),
            constants.SESSION_CLUSTER_ENTRYPOINT,
            cluster_specification,
            detached=False,
            operation='deploy_session_cluster',
        )

        self._log_deployed_cluster(cluster_client_provider, 'session')

        return cluster_client_provider

    def deploy_application_cluster(self, cluster_specification: ClusterSpecification,
                                   application_configuration: ApplicationConfiguration) -> ClusterClientProvider:
        operation = 'deploy_application_cluster'

        if self._get_rest_service() is not None:
            raise ClusterAlreadyExistsError(self._cluster_id, operation)

        if cluster_specification is None:
            raise ValueError(f'Cluster specification of {self._cluster_id} must not be None')
        if application_configuration is None:
            raise ValueError(f'Application configuration of {self._cluster_id} must not be None')

        configuration = self._configuration.copy()

        deployment_target = configuration.get(DeploymentOptions.TARGET)
        if deployment_target != KubernetesDeploymentTarget.APPLICATION:
            raise DeploymentTargetMismatchError(
                self._cluster_id, KubernetesDeploymentTarget.APPLICATION.value, deployment_target, operation
            )

        application_configuration.apply_to_configuration(configuration)

        # Python jobs are started from the image, there is no user jar to check
        if not is_python_program(application_configuration.application_class_name,
                                 application_configuration.program_arguments):
            pipeline_jars = check_jar_file_for_application_mode(configuration)
            if len(pipeline_jars) != 1:
                raise ArtifactCountInvalidError(self._cluster_id, len(pipeline_jars), operation)

        cluster_client_provider = self._deploy_cluster_internal(
            configuration,
            constants.APPLICATION_CLUSTER_ENTRYPOINT,
            cluster_specification,
            detached=False,
            operation=operation,
        )

        self._log_deployed_cluster(cluster_client_provider, 'application')

        return cluster_client_provider

    def deploy_job_cluster(self, cluster_specification: ClusterSpecification, job_graph: Any,
                           detached: bool) -> ClusterClientProvider:
        raise UnsupportedDeploymentModeError(self._cluster_id)

    def _get_rest_service(self) -> Any:
        try:
            return self._client.get_service(ServiceType.REST_SERVICE, self._cluster_id)
        except Exception as e:
            self._client.handle_exception(e)
            raise ClusterDeploymentError(f'Could not check whether cluster {self._cluster_id} exists.',
                                         self._cluster_id, 'deploy_application_cluster') from e

    def _deploy_cluster_internal(self, configuration: Configuration, entry_point: str,
                                 cluster_specification: ClusterSpecification, detached: bool,
                                 operation: str) -> ClusterClientProvider:
        execution_mode = ExecutionMode.DETACHED if detached else ExecutionMode.NORMAL
        configuration.set(ClusterEntrypointOptions.EXECUTION_MODE, execution_mode.value)
        configuration.set(KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS, entry_point)

        # Blob, TaskManager RPC and REST ports are exposed through services, so they need fixed values
        check_and_update_port_config_option(configuration, BlobServerOptions.PORT, constants.BLOB_SERVER_PORT)
        check_and_update_port_config_option(configuration, TaskManagerOptions.RPC_PORT,
                                            constants.TASK_MANAGER_RPC_PORT)
        check_and_update_port_config_option(configuration, RestOptions.BIND_PORT, constants.REST_PORT)

        if is_high_availability_mode_activated(configuration):
            configuration.set(HighAvailabilityOptions.HA_CLUSTER_ID, self._cluster_id)
            check_and_update_port_config_option(configuration, HighAvailabilityOptions.HA_JOB_MANAGER_PORT_RANGE,
                                                configuration.get(JobManagerOptions.PORT))

        try:
            parameters = KubernetesJobManagerParameters(configuration, cluster_specification)

            specification = KubernetesJobManagerFactory.build_kubernetes_job_manager_specification(parameters)

            self._client.create_job_manager_component(specification)
        except Exception as e:
            self._client.handle_exception(e)
            self._logger.warning(f'Failed to create the Kubernetes cluster "{self._cluster_id}", '
                                 f'try to clean up the residual resources.')
            try:
                self._client.stop_and_cleanup_cluster(self._cluster_id)
            except Exception as cleanup_error:
                self._logger.exception(f'Failed to stop and clean up the Kubernetes cluster "{self._cluster_id}": '
                                       f'{cleanup_error}', exc_info=False)

            raise ClusterDeploymentFailedError(self._cluster_id, operation) from e

        return self._create_cluster_client_provider(configuration, self._cluster_id)

    def _log_deployed_cluster(self, cluster_client_provider: ClusterClientProvider, mode: str) -> None:
        try:
            with cluster_client_provider() as cluster_client:
                self._logger.info(f'Create flink {mode} cluster {self._cluster_id} successfully, '
                                  f'JobManager Web Interface: {cluster_client.get_web_interface_url()}')
        except EndpointUnavailableError:
            self._logger.info(f'Create flink {mode} cluster {self._cluster_id} successfully, '
                              f'JobManager Web Interface is not available yet')
        except ClusterRetrieveError as e:
            # The cluster exists at this point, only the web interface lookup failed
            self._logger.warning(f'Create flink {mode} cluster {self._cluster_id} successfully, '
                                 f'but could not resolve the JobManager Web Interface: {e}')

    def kill_cluster(self, cluster_id: str) -> None:
        try:
            self._client.stop_and_cleanup_cluster(cluster_id)
        except Exception as e:
            self._client.handle_exception(e)
            raise ClusterKillError(cluster_id) from e

        self._logger.info(f'Kubernetes cluster {cluster_id} killed')

    def close(self) -> None:
        try:
            self._client.close()
        except Exception as e:
            self._client.handle_exception(e)
            self._logger.error(f'{ClusterCloseError(self._cluster_id)}, exception {e}')

    def __enter__(self) -> 'KubernetesClusterDescriptor':
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
