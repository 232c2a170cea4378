class ClusterError(Exception):
    def __init__(self, message: str, cluster_id: str | None = None, operation: str | None = None):
        self.cluster_id = cluster_id
        self.operation = operation

        prefix = f'[{operation}] ' if operation else ''
        super().__init__(f'{prefix}{message}')


class ClusterDeploymentError(ClusterError):
    pass


class ClusterAlreadyExistsError(ClusterDeploymentError):
    def __init__(self, cluster_id: str, operation: str = 'deploy_application_cluster'):
        super().__init__(f'The Flink cluster {cluster_id} already exists.', cluster_id, operation)


class DeploymentTargetMismatchError(ClusterDeploymentError):
    def __init__(self, cluster_id: str, expected: str, actual: str | None, operation: str = 'deploy_application_cluster'):
        self.expected = expected
        self.actual = actual

        super().__init__(
            f'Could not deploy Kubernetes Application Cluster {cluster_id}. '
            f'Expected execution.target={expected} but actual one was "{actual}"',
            cluster_id,
            operation,
        )


class ArtifactCountInvalidError(ClusterDeploymentError):
    def __init__(self, cluster_id: str, count: int, operation: str = 'deploy_application_cluster'):
        self.count = count

        super().__init__(
            f'Application cluster {cluster_id} should only have one jar, found {count}.', cluster_id, operation
        )


class UnsupportedDeploymentModeError(ClusterDeploymentError):
    def __init__(self, cluster_id: str, operation: str = 'deploy_job_cluster'):
        super().__init__(
            f'Per-Job Mode not supported by Active Kubernetes deployments (cluster {cluster_id}).',
            cluster_id,
            operation,
        )


class ClusterDeploymentFailedError(ClusterDeploymentError):
    def __init__(self, cluster_id: str, operation: str):
        super().__init__(f'Could not create Kubernetes cluster "{cluster_id}".', cluster_id, operation)


class ClusterRetrieveError(ClusterError):
    pass


class EndpointUnavailableError(ClusterRetrieveError):
    def __init__(self, cluster_id: str, operation: str = 'retrieve'):
        super().__init__(f'Could not get the rest endpoint of {cluster_id}', cluster_id, operation)


class ClusterKillError(ClusterError):
    def __init__(self, cluster_id: str, operation: str = 'kill_cluster'):
        super().__init__(f'Could not kill Kubernetes cluster {cluster_id}', cluster_id, operation)


class ClusterCloseError(ClusterError):
    def __init__(self, cluster_id: str, operation: str = 'close'):
        super().__init__(f'Failed to close Kubernetes client of cluster {cluster_id}', cluster_id, operation)


class ClusterClientError(ClusterError):
    pass
