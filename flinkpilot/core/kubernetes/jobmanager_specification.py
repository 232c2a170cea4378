from dataclasses import dataclass, field
from typing import Any

import yaml
from kubernetes import client


@dataclass(frozen=True)
class KubernetesJobManagerSpecification:
    deployment: client.V1Deployment
    accompanying_resources: list[Any] = field(default_factory=list)

    def to_manifests(self) -> list[dict[str, Any]]:
        api_client = client.ApiClient()
        return [api_client.sanitize_for_serialization(x) for x in [self.deployment, *self.accompanying_resources]]

    def to_yaml(self) -> str:
        return yaml.safe_dump_all(self.to_manifests(), default_flow_style=False, sort_keys=False)
