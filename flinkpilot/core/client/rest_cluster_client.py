from types import TracebackType
from typing import Any

import httpx

from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.options import RestOptions
from flinkpilot.core.exceptions import ClusterClientError
from flinkpilot.core.utils import setup_logger


class RestClusterClient:
    """Client for the JobManager REST API of one cluster.

    Must be closed after use, preferably as a context manager.
    """

    def __init__(self, configuration: Configuration, cluster_id: str, http_client: httpx.Client | None = None):
        self._logger = setup_logger('RestClusterClient')

        address = configuration.get(RestOptions.ADDRESS)
        if not address:
            raise ValueError(f'{RestOptions.ADDRESS.key} must be set to create a REST client for {cluster_id}')

        self._cluster_id = cluster_id
        self._web_interface_url = f'http://{address}:{configuration.get(RestOptions.PORT)}'

        timeout = configuration.get(RestOptions.CONNECTION_TIMEOUT) / 1000
        self._client = http_client or httpx.Client(base_url=self._web_interface_url, timeout=timeout)

    @property
    def cluster_id(self) -> str:
        return self._cluster_id

    def get_web_interface_url(self) -> str:
        return self._web_interface_url

    def _request(self, method: str, path: str, operation: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f'{self._web_interface_url}{path} returned an error status: {e.response.status_code} - {e.response.text}'
            self._logger.exception(msg, exc_info=False)
            raise ClusterClientError(msg, self._cluster_id, operation) from e
        except httpx.RequestError as e:
            msg = f'Network error when connecting to {self._web_interface_url}{path}: {e}'
            self._logger.exception(msg, exc_info=False)
            raise ClusterClientError(msg, self._cluster_id, operation) from e

        return response.json() if response.content else None

    def get_cluster_overview(self) -> dict[str, Any]:
        return self._request('GET', '/overview', 'get_cluster_overview')

    def list_jobs(self) -> list[dict[str, Any]]:
        return self._request('GET', '/jobs/overview', 'list_jobs').get('jobs', [])

    def cancel_job(self, job_id: str) -> None:
        self._logger.info(f'Cancelling job {job_id} on cluster {self._cluster_id}')
        self._request('PATCH', f'/jobs/{job_id}', 'cancel_job', params={'mode': 'cancel'})

    def trigger_savepoint(self, job_id: str, target_directory: str | None = None, cancel_job: bool = False) -> str:
        body = {'cancel-job': cancel_job}
        if target_directory:
            body['target-directory'] = target_directory

        response = self._request('POST', f'/jobs/{job_id}/savepoints', 'trigger_savepoint', json=body)
        return response['request-id']

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> 'RestClusterClient':
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
