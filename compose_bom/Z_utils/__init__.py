"""
Z_utils: Network and shared helpers.

Provides:
- Z01: HttpSourceFetcher (requests.Session based text / JSON fetcher)
"""
