from collections.abc import Callable

from flinkpilot.core.client.rest_cluster_client import RestClusterClient

# Deferred factory: every call resolves the endpoint again and returns a new client the caller must close
ClusterClientProvider = Callable[[], RestClusterClient]

__all__ = ['ClusterClientProvider', 'RestClusterClient']
