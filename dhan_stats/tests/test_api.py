"""
Pytest test module for the stats HTTP endpoints.

Requests go through the real router, middleware pipeline and services; only
the connection manager (FakeConnectionManager), the settings and the rate
limiter are injected through dependency_overrides.

Test Classes:
- TestPreflightAndMethods: OPTIONS and 405 handling
- TestAuthentication: 401 paths through the real endpoint
- TestRateLimiting: 429 responses and ordering before auth
- TestSuccessfulResponses: envelopes, Cache-Control and stable data
- TestTimeSeriesEndpoint: filter validation and narrowing
- TestErrorResponses: 500 paths and message sanitization
- TestApplication: lifespan wiring of the real application
"""

import asyncio
from typing import Any, List

import pytest
from fastapi.testclient import TestClient

from dhan_stats.core.database import ConnectionManager
from dhan_stats.core.errors import ConfigurationError
from dhan_stats.middleware.rate_limit import InMemoryRateLimiter
from dhan_stats.tests.conftest import AUTH_HEADERS, FakeConnectionManager


STATS_ROUTES = [
    ('/stats-global', 'public, max-age=60'),
    ('/stats-users', 'public, max-age=60'),
    ('/stats-transactions', 'public, max-age=60'),
    ('/stats-finance', 'public, max-age=60'),
    ('/stats-timeseries', 'public, max-age=300'),
    ('/stats-health', 'public, max-age=30'),
]

ROUTE_PATHS = [path for path, _ in STATS_ROUTES]


class SlowConnectionManager(FakeConnectionManager):
    """Answers every query after a delay."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay

    async def execute(self, query: str, *args: Any) -> List[Any]:
        await asyncio.sleep(self.delay)
        return await super().execute(query, *args)


# =============================================================================
# Preflight and method handling
# =============================================================================

class TestPreflightAndMethods:

    @pytest.mark.parametrize('path', ROUTE_PATHS)
    def test_options_is_204_without_auth(self, client: TestClient, path: str) -> None:
        response = client.options(path, headers={'Origin': 'https://admin.dhandiary.app'})

        assert response.status_code == 204
        assert response.content == b''
        assert response.headers['access-control-allow-origin'] == 'https://admin.dhandiary.app'
        assert response.headers['access-control-allow-methods'] == 'GET, OPTIONS'
        assert response.headers['access-control-max-age'] == '86400'

    def test_options_does_not_touch_database(self, client: TestClient, fake_db: FakeConnectionManager) -> None:
        client.options('/stats-global')

        assert fake_db.queries == []

    @pytest.mark.parametrize('method', ['post', 'put', 'patch', 'delete'])
    def test_other_methods_are_405(self, client: TestClient, method: str) -> None:
        response = getattr(client, method)('/stats-users', headers=AUTH_HEADERS)

        assert response.status_code == 405
        assert response.json() == {'success': False, 'error': 'Method not allowed'}
        assert response.headers['access-control-allow-origin'] == '*'

    @pytest.mark.parametrize('method', ['TRACE', 'CONNECT'])
    def test_uncommon_methods_get_the_same_405_envelope(self, client: TestClient, method: str) -> None:
        response = client.request(method, '/stats-users', headers={**AUTH_HEADERS, 'Origin': 'https://admin.dhandiary.app'})

        assert response.status_code == 405
        assert response.json() == {'success': False, 'error': 'Method not allowed'}
        assert response.headers['access-control-allow-origin'] == 'https://admin.dhandiary.app'

    def test_head_is_405_with_cors_headers(self, client: TestClient, fake_db: FakeConnectionManager) -> None:
        response = client.head('/stats-users', headers={**AUTH_HEADERS, 'Origin': 'https://admin.dhandiary.app'})

        assert response.status_code == 405
        assert response.headers['access-control-allow-origin'] == 'https://admin.dhandiary.app'
        assert response.headers['content-type'] == 'application/json'
        assert 'allow' not in response.headers
        assert fake_db.queries == []


# =============================================================================
# Authentication
# =============================================================================

class TestAuthentication:

    @pytest.mark.parametrize('path', ROUTE_PATHS)
    def test_missing_header_is_401(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 401
        assert response.json() == {'success': False, 'error': 'Missing authorization header'}
        assert response.headers['access-control-allow-origin'] == '*'

    def test_wrong_secret_is_401(self, client: TestClient, fake_db: FakeConnectionManager) -> None:
        response = client.get('/stats-users', headers={'Authorization': 'Bearer not-the-secret'})

        assert response.status_code == 401
        assert response.json()['error'] == 'Invalid credentials'
        assert fake_db.queries == []

    def test_unconfigured_secret_is_401(self, make_client, make_settings, fake_db) -> None:
        client = make_client(fake_db, settings=make_settings(admin_api_key=None))

        response = client.get('/stats-users', headers=AUTH_HEADERS)

        assert response.status_code == 401
        assert response.json()['error'] == 'Server configuration error'

    def test_auth_runs_before_validation(self, client: TestClient) -> None:
        response = client.get('/stats-timeseries?range=3d')

        assert response.status_code == 401


# =============================================================================
# Rate limiting
# =============================================================================

class TestRateLimiting:

    def test_101st_request_is_429(self, client: TestClient) -> None:
        for _ in range(100):
            assert client.get('/stats-health', headers=AUTH_HEADERS).status_code == 200

        response = client.get('/stats-health', headers=AUTH_HEADERS)

        assert response.status_code == 429
        assert response.json() == {'success': False, 'error': 'Rate limit exceeded'}
        assert response.headers['x-ratelimit-remaining'] == '0'
        assert int(response.headers['x-ratelimit-reset']) > 0
        assert response.headers['access-control-allow-origin'] == '*'

    def test_unauthenticated_requests_count_toward_limit(self, make_client, fake_db) -> None:
        client = make_client(fake_db, limiter=InMemoryRateLimiter(max_requests=1, window_seconds=60))

        assert client.get('/stats-users').status_code == 401
        assert client.get('/stats-users', headers=AUTH_HEADERS).status_code == 429

    def test_clients_are_limited_separately(self, make_client, fake_db) -> None:
        client = make_client(fake_db, limiter=InMemoryRateLimiter(max_requests=1, window_seconds=60))

        first = client.get('/stats-users', headers={**AUTH_HEADERS, 'X-Forwarded-For': '203.0.113.1'})
        second = client.get('/stats-users', headers={**AUTH_HEADERS, 'X-Forwarded-For': '203.0.113.2'})

        assert first.status_code == 200
        assert second.status_code == 200


# =============================================================================
# Successful responses
# =============================================================================

class TestSuccessfulResponses:

    @pytest.mark.parametrize('path, cache_control', STATS_ROUTES)
    def test_envelope_and_cache_control(self, client: TestClient, path: str, cache_control: str) -> None:
        response = client.get(path, headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert response.headers['cache-control'] == cache_control
        assert response.headers['content-type'].startswith('application/json')
        body = response.json()
        assert body['success'] is True
        assert 'error' not in body
        assert body['timestamp'].endswith('Z')
        assert isinstance(body['data'], dict)

    def test_users_payload(self, client: TestClient) -> None:
        data = client.get('/stats-users', headers=AUTH_HEADERS).json()['data']

        assert data['totalUsers'] == 120
        assert data['usersWithTransactionsPercent'] == 75.0

    def test_finance_payload(self, client: TestClient) -> None:
        data = client.get('/stats-finance', headers=AUTH_HEADERS).json()['data']

        assert data['highestTransaction'] == {'amount': 75000.0, 'type': 'income', 'date': '2026-09-30'}
        assert [month['monthLabel'] for month in data['monthlyTrend']] == ['Oct 2026', 'Sep 2026']

    def test_repeated_requests_return_identical_data(self, client: TestClient) -> None:
        first = client.get('/stats-users', headers=AUTH_HEADERS).json()
        second = client.get('/stats-users', headers=AUTH_HEADERS).json()

        assert first['data'] == second['data']

    def test_global_overview_agrees_with_finance(self, client: TestClient) -> None:
        overview = client.get('/stats-global', headers=AUTH_HEADERS).json()['data']
        finance = client.get('/stats-finance', headers=AUTH_HEADERS).json()['data']

        assert overview['financial']['totalIncome'] == finance['totalIncome']
        assert overview['snapshot']['dataFreshness'] == 'Real-time'

    def test_empty_database_overview(self, make_client, empty_db: FakeConnectionManager) -> None:
        client = make_client(empty_db)

        response = client.get('/stats-global', headers=AUTH_HEADERS)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['user']['totalUsers'] == 0
        assert data['user']['userGrowthRate'] == 0
        assert data['transaction']['totalTransactions'] == 0
        assert data['financial']['netBalance'] == 0
        assert data['health']['lastTransactionTime'] is None

    def test_empty_database_health_keeps_nulls(self, make_client, empty_db: FakeConnectionManager) -> None:
        data = make_client(empty_db).get('/stats-health', headers=AUTH_HEADERS).json()['data']

        assert data['lastTransactionTime'] is None
        assert data['triggersHealth'] == {'missingSummaries': 30, 'inconsistentData': True}
        assert data['databaseSize'] == {'estimated': '0.00 MB'}


# =============================================================================
# Time series endpoint
# =============================================================================

class TestTimeSeriesEndpoint:

    def test_invalid_range_is_400(self, client: TestClient, fake_db: FakeConnectionManager) -> None:
        response = client.get('/stats-timeseries?range=3d', headers=AUTH_HEADERS)

        assert response.status_code == 400
        assert response.json() == {
            'success': False,
            'error': 'Invalid range. Must be one of: 7d, 30d, 90d, 12m, all',
        }
        assert fake_db.queries == []

    def test_inverted_dates_are_400(self, client: TestClient) -> None:
        response = client.get('/stats-timeseries?from=2026-10-10&to=2026-10-01', headers=AUTH_HEADERS)

        assert response.status_code == 400
        assert response.json()['error'] == '"from" date must be before "to" date'

    def test_explicit_dates_narrow_series(self, client: TestClient) -> None:
        response = client.get('/stats-timeseries?from=2026-09-01&to=2026-09-30', headers=AUTH_HEADERS)

        assert response.status_code == 200
        data = response.json()['data']
        assert [day['date'] for day in data['dailyActivity']] == ['2026-09-20']
        assert [month['monthLabel'] for month in data['monthlyGrowth']] == ['Sep 2026']
        assert data['peakUsageDay'] == {'date': '2026-09-20', 'transactionCount': 45}

    def test_no_filters_returns_full_series(self, client: TestClient) -> None:
        data = client.get('/stats-timeseries', headers=AUTH_HEADERS).json()['data']

        assert len(data['dailyActivity']) == 3
        assert len(data['monthlyGrowth']) == 3


# =============================================================================
# Error responses
# =============================================================================

class TestErrorResponses:

    def test_service_error_message_passes_through_in_development(self, client, fake_db) -> None:
        fake_db.error = RuntimeError('relation "daily_summaries" does not exist')

        response = client.get('/stats-health', headers=AUTH_HEADERS)

        assert response.status_code == 500
        assert response.json() == {'success': False, 'error': 'relation "daily_summaries" does not exist'}
        assert response.headers['access-control-allow-origin'] == '*'
        assert 'cache-control' not in response.headers

    def test_production_hides_internal_details(self, make_client, make_settings, fake_db) -> None:
        fake_db.error = RuntimeError('relation "daily_summaries" does not exist')
        client = make_client(fake_db, settings=make_settings(environment='production'))

        response = client.get('/stats-health', headers=AUTH_HEADERS)

        assert response.status_code == 500
        assert response.json()['error'] == 'An internal error occurred'

    def test_configuration_error_is_generic(self, client, fake_db) -> None:
        fake_db.error = ConfigurationError('DATABASE_URL environment variable is not set')

        response = client.get('/stats-users', headers=AUTH_HEADERS)

        assert response.status_code == 500
        assert response.json()['error'] == 'Server configuration error'

    def test_empty_error_message_is_replaced(self, client, fake_db) -> None:
        fake_db.error = RuntimeError()

        response = client.get('/stats-users', headers=AUTH_HEADERS)

        assert response.json()['error'] == 'An unexpected error occurred'

    def test_missing_aggregate_row_is_500(self, make_client) -> None:
        client = make_client(FakeConnectionManager())

        response = client.get('/stats-transactions', headers=AUTH_HEADERS)

        assert response.status_code == 500
        assert response.json()['error'] == 'Failed to fetch transaction metrics'

    def test_slow_service_times_out(self, make_client, make_settings) -> None:
        client = make_client(
            SlowConnectionManager(delay=1.0),
            settings=make_settings(request_timeout_seconds=0.05),
        )

        response = client.get('/stats-users', headers=AUTH_HEADERS)

        assert response.status_code == 500
        assert response.json()['error'] == 'Request timed out'


# =============================================================================
# Application wiring
# =============================================================================

class TestApplication:

    def test_lifespan_creates_shared_services(self) -> None:
        from dhan_stats import main

        with TestClient(main.app) as client:
            assert isinstance(main.app.state.connection_manager, ConnectionManager)
            assert main.app.state.rate_limiter is not None

            response = client.options(f'{main.settings.api_prefix}/stats-health')

        assert response.status_code == 204
