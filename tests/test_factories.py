import yaml

from kubernetes import client

from flinkpilot.core.configuration.options import HighAvailabilityOptions, KubernetesConfigOptions
from flinkpilot.core.kubernetes.decorators import InitJobManagerDecorator, InitTaskManagerDecorator
from flinkpilot.core.kubernetes.factory import KubernetesJobManagerFactory, KubernetesTaskManagerFactory


class TestKubernetesJobManagerFactory:
    def test_initializer_comes_first(self, job_manager_parameters):
        steps = KubernetesJobManagerFactory.get_step_decorators(job_manager_parameters)

        assert isinstance(steps[0], InitJobManagerDecorator)
        assert [repr(x) for x in steps] == [
            'InitJobManagerDecorator',
            'EnvSecretsDecorator',
            'MountSecretsDecorator',
            'CmdJobManagerDecorator',
            'InternalServiceDecorator',
            'ExternalServiceDecorator',
            'FlinkConfMountDecorator',
        ]

    def test_deployment(self, job_manager_parameters):
        specification = KubernetesJobManagerFactory.build_kubernetes_job_manager_specification(job_manager_parameters)
        deployment = specification.deployment

        assert deployment.api_version == 'apps/v1'
        assert deployment.kind == 'Deployment'
        assert deployment.metadata.name == 'flink-test'
        assert deployment.spec.replicas == 1
        assert deployment.spec.selector.match_labels == {
            'type': 'flink-native-kubernetes', 'app': 'flink-test', 'component': 'jobmanager'
        }

        pod_spec = deployment.spec.template.spec
        [main_container] = pod_spec.containers
        assert main_container.name == 'flink-job-manager'
        assert main_container.args == ['bash', '-c', 'kubernetes-jobmanager.sh kubernetes-session']
        assert [x.name for x in main_container.env][-3:] == ['_HOST_IP_ADDRESS', '_POD_IP_ADDRESS', 'CLUSTER_ID']
        assert [x.name for x in pod_spec.volumes] == ['flink-config-volume']

    def test_accompanying_resources_in_step_order(self, job_manager_parameters):
        specification = KubernetesJobManagerFactory.build_kubernetes_job_manager_specification(job_manager_parameters)

        assert [(x.kind, x.metadata.name) for x in specification.accompanying_resources] == [
            ('Service', 'flink-test'),
            ('Service', 'flink-test-rest'),
            ('ConfigMap', 'flink-config-flink-test'),
        ]

    def test_high_availability_has_no_internal_service(self, job_manager_parameters):
        job_manager_parameters.configuration.set(HighAvailabilityOptions.HA_MODE, 'zookeeper')
        job_manager_parameters.configuration.set(KubernetesConfigOptions.KUBERNETES_JOBMANAGER_REPLICAS, 2)

        specification = KubernetesJobManagerFactory.build_kubernetes_job_manager_specification(job_manager_parameters)

        assert specification.deployment.spec.replicas == 2
        assert [x.metadata.name for x in specification.accompanying_resources] == [
            'flink-test-rest', 'flink-config-flink-test'
        ]

    def test_to_yaml(self, job_manager_parameters):
        specification = KubernetesJobManagerFactory.build_kubernetes_job_manager_specification(job_manager_parameters)

        documents = list(yaml.safe_load_all(specification.to_yaml()))

        assert [x['kind'] for x in documents] == ['Deployment', 'Service', 'Service', 'ConfigMap']
        assert documents[0]['spec']['template']['spec']['restartPolicy'] == 'Always'


class TestKubernetesTaskManagerFactory:
    def test_pod(self, task_manager_parameters):
        pod = KubernetesTaskManagerFactory.build_task_manager_kubernetes_pod(task_manager_parameters)

        assert isinstance(pod, client.V1Pod)
        assert pod.metadata.name == 'flink-test-taskmanager-1-1'

        [main_container] = pod.spec.containers
        assert main_container.name == 'flink-task-manager'
        assert main_container.command == ['/docker-entrypoint.sh']
        assert [x.mount_path for x in main_container.volume_mounts] == ['/opt/flink/conf']
        assert [x.name for x in main_container.env][-3:] == ['_HOST_IP_ADDRESS', '_POD_IP_ADDRESS', 'CLUSTER_ID']

    def test_full_chain_keeps_injected_envs_last(self, task_manager_parameters):
        configuration = task_manager_parameters.configuration
        configuration.set('containerized.taskmanager.env.LOG_LEVEL', 'debug')
        configuration.set(KubernetesConfigOptions.KUBERNETES_ENV_SECRET_KEY_REF,
                          'env:DB_PASSWORD,secret:db-creds,key:password')
        configuration.set(KubernetesConfigOptions.KUBERNETES_SECRETS, 'tls:/opt/flink/tls')

        pod = KubernetesTaskManagerFactory.build_task_manager_kubernetes_pod(task_manager_parameters)
        main_container = pod.spec.containers[0]

        assert [x.name for x in main_container.env] == [
            'DB_PASSWORD', 'LOG_LEVEL', '_HOST_IP_ADDRESS', '_POD_IP_ADDRESS', 'CLUSTER_ID'
        ]
        assert [x.name for x in pod.spec.volumes] == ['tls-volume', 'flink-config-volume']

    def test_initializer_comes_first(self, task_manager_parameters):
        steps = KubernetesTaskManagerFactory.get_step_decorators(task_manager_parameters)

        assert isinstance(steps[0], InitTaskManagerDecorator)
        assert len(steps) == 5
