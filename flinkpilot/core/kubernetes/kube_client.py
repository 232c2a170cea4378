import copy
import json
from abc import ABC, abstractmethod
from enum import StrEnum
from pathlib import Path
from typing import Any

import urllib3
from kubernetes import client
from kubernetes import config as kube_config
from kubernetes.client import ApiException
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_fixed

from flinkpilot.core import config
from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.options import KubernetesConfigOptions, RestOptions, ServiceExposedType
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import Endpoint
from flinkpilot.core.kubernetes.jobmanager_specification import KubernetesJobManagerSpecification
from flinkpilot.core.kubernetes.kubernetes_utils import (
    get_deployment_name,
    get_internal_service_name,
    get_namespaced_service_name,
    get_rest_service_name,
)
from flinkpilot.core.utils import setup_logger


class ServiceType(StrEnum):
    INTERNAL_SERVICE = 'internal'
    REST_SERVICE = 'rest'

    def service_name(self, cluster_id: str) -> str:
        if self == ServiceType.REST_SERVICE:
            return get_rest_service_name(cluster_id)
        return get_internal_service_name(cluster_id)


class FlinkKubeClient(ABC):
    """Operations the cluster descriptor needs from the Kubernetes API server."""

    @abstractmethod
    def create_job_manager_component(self, specification: KubernetesJobManagerSpecification) -> None:
        pass

    @abstractmethod
    def create_task_manager_pod(self, pod: client.V1Pod) -> None:
        pass

    @abstractmethod
    def stop_pod(self, pod_name: str) -> None:
        pass

    @abstractmethod
    def stop_and_cleanup_cluster(self, cluster_id: str) -> None:
        pass

    @abstractmethod
    def get_rest_endpoint(self, cluster_id: str) -> Endpoint | None:
        pass

    @abstractmethod
    def get_service(self, service_type: ServiceType, cluster_id: str) -> client.V1Service | None:
        pass

    @abstractmethod
    def handle_exception(self, exception: Exception) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


def _is_transient_error(exception: BaseException) -> bool:
    if isinstance(exception, ApiException):
        return exception.status is not None and exception.status >= 500
    return isinstance(exception, urllib3.exceptions.HTTPError)


_retry_transient = retry(
    retry=retry_if_exception(_is_transient_error), wait=wait_fixed(2), stop=stop_after_attempt(3), reraise=True
)


class KubernetesFlinkKubeClient(FlinkKubeClient):
    def __init__(self, configuration: Configuration, api_client: client.ApiClient):
        self._logger = setup_logger('KubernetesFlinkKubeClient')

        self._configuration = configuration
        self._namespace = configuration.get(KubernetesConfigOptions.NAMESPACE)

        self._api_client = api_client
        self._core = client.CoreV1Api(api_client)  # Pods, Services, ConfigMaps, Nodes
        self._apps = client.AppsV1Api(api_client)  # Deployments

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> 'KubernetesFlinkKubeClient':
        kubeconfig_path = configuration.get(KubernetesConfigOptions.KUBE_CONFIG_FILE) or config.KUBECONFIG_PATH

        if kubeconfig_path:
            api_client = kube_config.new_client_from_config(config_file=str(Path(kubeconfig_path).expanduser()))
        else:
            kube_config.load_incluster_config()
            api_client = client.ApiClient()

        return cls(configuration, api_client)

    def create_job_manager_component(self, specification: KubernetesJobManagerSpecification) -> None:
        deployment_name = specification.deployment.metadata.name
        self._logger.info(f'Creating JobManager deployment {deployment_name} in namespace {self._namespace}')

        deployment = self._apps.create_namespaced_deployment(self._namespace, body=specification.deployment)

        # Accompanying resources are owned by the deployment so that deleting it removes everything
        owner_reference = self._owner_reference(deployment)

        for resource in specification.accompanying_resources:
            resource = copy.deepcopy(resource)
            resource.metadata.owner_references = [owner_reference]
            self._create_resource(resource)

        self._logger.info(f'JobManager component of {deployment_name} created successfully!')

    def _create_resource(self, resource: Any) -> None:
        if isinstance(resource, client.V1Service):
            self._core.create_namespaced_service(self._namespace, body=resource)
        elif isinstance(resource, client.V1ConfigMap):
            self._core.create_namespaced_config_map(self._namespace, body=resource)
        else:
            raise ValueError(f'Unsupported accompanying resource type: {type(resource).__name__}')

        self._logger.debug(f'{resource.kind} {resource.metadata.name} created')

    @staticmethod
    def _owner_reference(deployment: client.V1Deployment) -> client.V1OwnerReference:
        return client.V1OwnerReference(
            api_version=constants.APPS_API_VERSION,
            kind='Deployment',
            name=deployment.metadata.name,
            uid=deployment.metadata.uid,
            block_owner_deletion=True,
            controller=True,
        )

    def create_task_manager_pod(self, pod: client.V1Pod) -> None:
        cluster_id = self._configuration.get(KubernetesConfigOptions.CLUSTER_ID)

        deployment = self._apps.read_namespaced_deployment(get_deployment_name(cluster_id), self._namespace)

        pod = copy.deepcopy(pod)
        pod.metadata.owner_references = [self._owner_reference(deployment)]

        self._core.create_namespaced_pod(self._namespace, body=pod)
        self._logger.info(f'TaskManager pod {pod.metadata.name} created')

    def stop_pod(self, pod_name: str) -> None:
        try:
            self._core.delete_namespaced_pod(pod_name, self._namespace)
        except ApiException as e:
            if e.status != 404:
                raise
            self._logger.warning(f'Pod {pod_name} does not exist, nothing to stop')

    def stop_and_cleanup_cluster(self, cluster_id: str) -> None:
        self._logger.info(f'Deleting deployment {cluster_id} and all resources owned by it')

        try:
            self._apps.delete_namespaced_deployment(
                get_deployment_name(cluster_id),
                self._namespace,
                body=client.V1DeleteOptions(propagation_policy='Foreground'),
            )
        except ApiException as e:
            if e.status != 404:
                raise
            self._logger.warning(f'Deployment {cluster_id} does not exist in namespace {self._namespace}')

    @_retry_transient
    def get_service(self, service_type: ServiceType, cluster_id: str) -> client.V1Service | None:
        service_name = service_type.service_name(cluster_id)

        try:
            return self._core.read_namespaced_service(service_name, self._namespace)
        except ApiException as e:
            if e.status != 404:
                raise
            self._logger.debug(f'Service {service_name} does not exist in namespace {self._namespace}')
            return None

    def get_rest_endpoint(self, cluster_id: str) -> Endpoint | None:
        service = self.get_service(ServiceType.REST_SERVICE, cluster_id)
        if service is None:
            return None

        rest_port = self._get_rest_service_port(service)
        exposed_type = ServiceExposedType(service.spec.type or ServiceExposedType.CLUSTER_IP.value)

        if exposed_type == ServiceExposedType.CLUSTER_IP:
            return Endpoint(get_namespaced_service_name(get_rest_service_name(cluster_id), self._namespace),
                            rest_port.port)

        if exposed_type == ServiceExposedType.NODE_PORT:
            address = self._get_node_address()
            if address is None or rest_port.node_port is None:
                return None
            return Endpoint(address, rest_port.node_port)

        ingress = service.status.load_balancer.ingress if service.status and service.status.load_balancer else None
        if not ingress:
            self._logger.info(f'Load balancer of {get_rest_service_name(cluster_id)} has not been assigned yet')
            return None

        address = ingress[0].ip or ingress[0].hostname
        return Endpoint(address, rest_port.port) if address else None

    def _get_rest_service_port(self, service: client.V1Service) -> client.V1ServicePort:
        for port in service.spec.ports or []:
            if port.name == constants.REST_PORT_NAME:
                return port

        return client.V1ServicePort(name=constants.REST_PORT_NAME, port=self._configuration.get(RestOptions.PORT))

    @_retry_transient
    def _get_node_address(self) -> str | None:
        nodes = self._core.list_node().items

        for address_type in ('ExternalIP', 'InternalIP'):
            for node in nodes:
                for address in node.status.addresses or []:
                    if address.type == address_type:
                        return address.address

        self._logger.warning('Could not find any node address to reach the NodePort service')
        return None

    def _parse_kubernetes_api_exception(self, exception: ApiException) -> tuple[str, str]:
        try:
            body = json.loads(exception.body)
        except (TypeError, ValueError):
            return exception.reason, str(exception.body)

        self._logger.debug(f'Original reason: {exception.reason}')

        return body.get('reason', exception.reason), body.get('message', '')

    def handle_exception(self, exception: Exception) -> None:
        if isinstance(exception, ApiException):
            reason, message = self._parse_kubernetes_api_exception(exception)
            self._logger.exception(f'Kubernetes API error ({exception.status}) {reason}: {message}', exc_info=False)
        else:
            self._logger.exception(f'Error while talking to Kubernetes: {exception}', exc_info=False)

    def close(self) -> None:
        self._api_client.close()
