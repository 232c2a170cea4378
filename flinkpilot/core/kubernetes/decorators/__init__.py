from flinkpilot.core.kubernetes.decorators.abstract_decorator import AbstractKubernetesStepDecorator
from flinkpilot.core.kubernetes.decorators.cmd_jobmanager_decorator import CmdJobManagerDecorator
from flinkpilot.core.kubernetes.decorators.cmd_taskmanager_decorator import CmdTaskManagerDecorator
from flinkpilot.core.kubernetes.decorators.env_secrets_decorator import EnvSecretsDecorator
from flinkpilot.core.kubernetes.decorators.external_service_decorator import ExternalServiceDecorator
from flinkpilot.core.kubernetes.decorators.flink_conf_mount_decorator import FlinkConfMountDecorator
from flinkpilot.core.kubernetes.decorators.init_jobmanager_decorator import InitJobManagerDecorator
from flinkpilot.core.kubernetes.decorators.init_taskmanager_decorator import InitTaskManagerDecorator
from flinkpilot.core.kubernetes.decorators.internal_service_decorator import InternalServiceDecorator
from flinkpilot.core.kubernetes.decorators.mount_secrets_decorator import MountSecretsDecorator

__all__ = [
    'AbstractKubernetesStepDecorator',
    'CmdJobManagerDecorator',
    'CmdTaskManagerDecorator',
    'EnvSecretsDecorator',
    'ExternalServiceDecorator',
    'FlinkConfMountDecorator',
    'InitJobManagerDecorator',
    'InitTaskManagerDecorator',
    'InternalServiceDecorator',
    'MountSecretsDecorator',
]
