'''
DhanDiary Stats Test Suite

Test Modules:
-------------
- test_row_decoding.py: null/NaN handling, ISO rendering, empty-result guard
- test_queries.py: query/column-schema contract, read-only queries
- test_database.py: lazy pool, guaranteed release, acquire timeout, shutdown
- test_services.py: metrics services against canned rows
  - Zero-user ratio rule
  - Time-series window narrowing and peak day
  - Overview consistency with the individual cards
- test_middleware.py: auth, rate limiting, validation, CORS, pipeline order
- test_api.py: end-to-end HTTP behaviour
  - OPTIONS 204 / 405 / 401 / 429 / 400 / 500 paths
  - Cache-Control per endpoint
  - Error sanitization in production

Running Tests:
--------------
    pip install -e ".[test]"
    pytest dhan_stats/tests -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
