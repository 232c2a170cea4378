import pytest

from pydantic import ValidationError

from flinkpilot.core.configuration.options import (
    ExternalResourceOptions,
    HighAvailabilityOptions,
    JobManagerOptions,
    KubernetesConfigOptions,
    KubernetesConfigOptionsInternal,
    KubernetesDeploymentTarget,
    RestOptions,
    ServiceExposedType,
    TaskManagerOptions,
)
from flinkpilot.core.kubernetes import constants
from flinkpilot.core.kubernetes.configuration import ClusterSpecification


class TestClusterSpecification:
    def test_memory_must_be_positive(self):
        with pytest.raises(ValidationError):
            ClusterSpecification(master_memory_mb=0, task_manager_memory_mb=1024)

    def test_default_slots(self):
        assert ClusterSpecification(master_memory_mb=1024, task_manager_memory_mb=1024).slots_per_task_manager == 1


class TestKubernetesJobManagerParameters:
    def test_cluster_id_too_long(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.CLUSTER_ID, 'x' * 46)

        with pytest.raises(ValueError, match='no more than 45 characters'):
            _ = job_manager_parameters.cluster_id

    def test_blank_cluster_id(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.CLUSTER_ID, '')

        with pytest.raises(ValueError, match='must not be blank'):
            _ = job_manager_parameters.cluster_id

    def test_labels_contain_selectors(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.JOB_MANAGER_LABELS, 'team:data,app:mine')

        assert job_manager_parameters.labels == {
            'team': 'data',
            'app': 'flink-test',
            'type': 'flink-native-kubernetes',
            'component': 'jobmanager',
        }
        assert job_manager_parameters.selectors == {
            'type': 'flink-native-kubernetes',
            'app': 'flink-test',
            'component': 'jobmanager',
        }

    def test_environments(self, job_manager_parameters):
        job_manager_parameters.configuration.set('containerized.master.env.LOG_LEVEL', 'debug')
        job_manager_parameters.configuration.set('containerized.taskmanager.env.OTHER', 'x')

        assert job_manager_parameters.environments == {'LOG_LEVEL': 'debug'}

    def test_service_account_fallback(self, job_manager_parameters):
        assert job_manager_parameters.service_account == 'default'

        job_manager_parameters.configuration.set(KubernetesConfigOptions.KUBERNETES_SERVICE_ACCOUNT, 'flink')
        assert job_manager_parameters.service_account == 'flink'

    def test_resources(self, job_manager_parameters):
        assert job_manager_parameters.job_manager_memory_mb == 1024
        assert job_manager_parameters.job_manager_cpu == 1.0
        assert job_manager_parameters.job_manager_memory_request_factor == 1.0

    @pytest.mark.parametrize('factor', ['0', '1.5', '-0.1'])
    def test_invalid_request_factor(self, job_manager_parameters, factor):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.JOB_MANAGER_MEMORY_REQUEST_FACTOR, factor)

        with pytest.raises(ValueError, match=r'must be in range \(0, 1\]'):
            _ = job_manager_parameters.job_manager_memory_request_factor

    def test_ports(self, job_manager_parameters):
        assert job_manager_parameters.rest_port == 8081
        assert job_manager_parameters.rest_bind_port == 8081
        assert job_manager_parameters.rpc_port == 6123
        assert job_manager_parameters.blob_server_port == 6124

    def test_unpinned_port_rejected(self, job_manager_parameters):
        job_manager_parameters.configuration.remove(RestOptions.BIND_PORT)

        with pytest.raises(ValueError, match='rest.bind-port should be specified to a fixed port'):
            _ = job_manager_parameters.rest_bind_port

    def test_bind_port_defaults_to_rest_port(self, job_manager_parameters):
        job_manager_parameters.configuration.remove(RestOptions.BIND_PORT)
        job_manager_parameters.configuration.set(RestOptions.PORT, '9000')

        assert job_manager_parameters.rest_port == 9000
        assert job_manager_parameters.rest_bind_port == 9000

    def test_rest_service_exposed_type(self, job_manager_parameters):
        assert job_manager_parameters.rest_service_exposed_type == ServiceExposedType.LOAD_BALANCER

        job_manager_parameters.configuration.set(KubernetesConfigOptions.REST_SERVICE_EXPOSED_TYPE, 'NodePort')
        assert job_manager_parameters.rest_service_exposed_type == ServiceExposedType.NODE_PORT

    def test_standby_replicas_require_high_availability(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.KUBERNETES_JOBMANAGER_REPLICAS, 2)

        with pytest.raises(ValueError, match='High availability should be enabled'):
            _ = job_manager_parameters.replicas

        job_manager_parameters.configuration.set(HighAvailabilityOptions.HA_MODE, 'zookeeper')
        assert job_manager_parameters.replicas == 2

    def test_zero_replicas(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.KUBERNETES_JOBMANAGER_REPLICAS, 0)

        with pytest.raises(ValueError, match='should be at least 1'):
            _ = job_manager_parameters.replicas

    def test_deployment_target(self, job_manager_parameters):
        assert job_manager_parameters.deployment_target == KubernetesDeploymentTarget.SESSION

        job_manager_parameters.configuration.set(KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS,
                                                 constants.APPLICATION_CLUSTER_ENTRYPOINT)
        assert job_manager_parameters.deployment_target == KubernetesDeploymentTarget.APPLICATION

    def test_missing_entrypoint_class(self, job_manager_parameters):
        job_manager_parameters.configuration.remove(KubernetesConfigOptionsInternal.ENTRY_POINT_CLASS)

        with pytest.raises(ValueError, match='must be specified'):
            _ = job_manager_parameters.entrypoint_class

    def test_cluster_side_properties(self, job_manager_parameters):
        job_manager_parameters.configuration.set(KubernetesConfigOptions.KUBE_CONFIG_FILE, '~/.kube/config')

        properties = job_manager_parameters.cluster_side_properties

        assert properties[JobManagerOptions.ADDRESS.key] == 'flink-test.default'
        assert properties[KubernetesConfigOptions.CLUSTER_ID.key] == 'flink-test'
        assert KubernetesConfigOptions.KUBE_CONFIG_FILE.key not in properties
        assert '$internal.deployment.config-dir' not in properties

    def test_cluster_side_properties_with_high_availability(self, job_manager_parameters):
        job_manager_parameters.configuration.set(HighAvailabilityOptions.HA_MODE, 'zookeeper')

        assert job_manager_parameters.is_internal_service_enabled is False
        assert JobManagerOptions.ADDRESS.key not in job_manager_parameters.cluster_side_properties

    def test_local_logging_files(self, job_manager_parameters, tmp_path):
        assert job_manager_parameters.has_log4j is False

        (tmp_path / 'log4j-console.properties').write_text('rootLogger.level = INFO\n')

        assert job_manager_parameters.has_log4j is True
        assert job_manager_parameters.has_logback is False


class TestKubernetesTaskManagerParameters:
    def test_basic_properties(self, task_manager_parameters):
        assert task_manager_parameters.pod_name == 'flink-test-taskmanager-1-1'
        assert task_manager_parameters.task_manager_memory_mb == 2048
        assert task_manager_parameters.rpc_port == 6122
        assert task_manager_parameters.labels['component'] == 'taskmanager'

    def test_cpu_falls_back_to_slots(self, task_manager_parameters):
        assert task_manager_parameters.task_manager_cpu == 2.0

        task_manager_parameters.configuration.set(KubernetesConfigOptions.TASK_MANAGER_CPU, '0.5')
        assert task_manager_parameters.task_manager_cpu == 0.5

    def test_unpinned_rpc_port(self, task_manager_parameters):
        task_manager_parameters.configuration.set(TaskManagerOptions.RPC_PORT, '0')

        with pytest.raises(ValueError, match='should not be 0 or a range'):
            _ = task_manager_parameters.rpc_port

    def test_external_resources(self, task_manager_parameters):
        configuration = task_manager_parameters.configuration
        configuration.set(ExternalResourceOptions.EXTERNAL_RESOURCE_LIST, 'gpu;fpga')
        configuration.set(ExternalResourceOptions.amount_option('gpu'), '2')
        configuration.set(ExternalResourceOptions.kubernetes_config_key_option('gpu'), 'nvidia.com/gpu')
        configuration.set(ExternalResourceOptions.amount_option('fpga'), '1')

        assert task_manager_parameters.task_manager_external_resources == {'nvidia.com/gpu': 2}

    def test_external_resource_amount_must_be_positive(self, task_manager_parameters):
        configuration = task_manager_parameters.configuration
        configuration.set(ExternalResourceOptions.EXTERNAL_RESOURCE_LIST, 'gpu')
        configuration.set(ExternalResourceOptions.amount_option('gpu'), '0')
        configuration.set(ExternalResourceOptions.kubernetes_config_key_option('gpu'), 'nvidia.com/gpu')

        with pytest.raises(ValueError, match='must be positive'):
            _ = task_manager_parameters.task_manager_external_resources
