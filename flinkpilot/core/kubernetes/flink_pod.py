import copy
from dataclasses import dataclass, field

from kubernetes import client


def _empty_pod() -> client.V1Pod:
    return client.V1Pod(metadata=client.V1ObjectMeta(), spec=client.V1PodSpec(containers=[]))


def _empty_container() -> client.V1Container:
    # name is mandatory for the client side validation, the initializer sets the real one
    return client.V1Container(name='')


@dataclass(frozen=True)
class FlinkPod:
    """A pod under construction together with its main container.

    The main container is kept apart from `pod.spec.containers` until the
    factory assembles the final resource, so decorators can edit either side
    independently.
    """
    pod: client.V1Pod = field(default_factory=_empty_pod)
    main_container: client.V1Container = field(default_factory=_empty_container)

    def copy(self) -> 'FlinkPod':
        return FlinkPod(pod=copy.deepcopy(self.pod), main_container=copy.deepcopy(self.main_container))

    def with_main_container(self, main_container: client.V1Container) -> 'FlinkPod':
        return FlinkPod(pod=copy.deepcopy(self.pod), main_container=main_container)
