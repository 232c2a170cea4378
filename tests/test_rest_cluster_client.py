import json

import httpx
import pytest

from flinkpilot.core.client import RestClusterClient
from flinkpilot.core.configuration import Configuration
from flinkpilot.core.configuration.options import RestOptions
from flinkpilot.core.exceptions import ClusterClientError


@pytest.fixture
def rest_configuration() -> Configuration:
    return Configuration({RestOptions.ADDRESS.key: 'flink.example.com', RestOptions.PORT.key: '8081'})


def _client(configuration: Configuration, handler) -> RestClusterClient:
    http_client = httpx.Client(base_url='http://flink.example.com:8081', transport=httpx.MockTransport(handler))
    return RestClusterClient(configuration, 'flink-test', http_client=http_client)


class TestRestClusterClient:
    def test_requires_address(self):
        with pytest.raises(ValueError, match='rest.address must be set'):
            RestClusterClient(Configuration(), 'flink-test')

    def test_web_interface_url(self, rest_configuration):
        with RestClusterClient(rest_configuration, 'flink-test') as cluster_client:
            assert cluster_client.get_web_interface_url() == 'http://flink.example.com:8081'
            assert cluster_client.cluster_id == 'flink-test'

    def test_get_cluster_overview(self, rest_configuration):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == '/overview'
            return httpx.Response(200, json={'taskmanagers': 2, 'slots-total': 4})

        with _client(rest_configuration, handler) as cluster_client:
            assert cluster_client.get_cluster_overview() == {'taskmanagers': 2, 'slots-total': 4}

    def test_list_jobs(self, rest_configuration):
        jobs = [{'jid': 'a1', 'state': 'RUNNING'}]

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == '/jobs/overview'
            return httpx.Response(200, json={'jobs': jobs})

        with _client(rest_configuration, handler) as cluster_client:
            assert cluster_client.list_jobs() == jobs

    def test_cancel_job(self, rest_configuration):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(202)

        with _client(rest_configuration, handler) as cluster_client:
            cluster_client.cancel_job('a1')

        [request] = requests
        assert request.method == 'PATCH'
        assert request.url.path == '/jobs/a1'
        assert request.url.params['mode'] == 'cancel'

    def test_trigger_savepoint(self, rest_configuration):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == 'POST'
            assert json.loads(request.content) == {'cancel-job': False, 'target-directory': 's3://savepoints'}
            return httpx.Response(202, json={'request-id': 'trigger-1'})

        with _client(rest_configuration, handler) as cluster_client:
            assert cluster_client.trigger_savepoint('a1', 's3://savepoints') == 'trigger-1'

    def test_error_status(self, rest_configuration):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text='Job not found')

        with _client(rest_configuration, handler) as cluster_client:
            with pytest.raises(ClusterClientError, match=r'\[cancel_job\] .* returned an error status: 404') as exc_info:
                cluster_client.cancel_job('missing')

        assert exc_info.value.cluster_id == 'flink-test'
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_network_error(self, rest_configuration):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        with _client(rest_configuration, handler) as cluster_client:
            with pytest.raises(ClusterClientError, match='Network error'):
                cluster_client.get_cluster_overview()
