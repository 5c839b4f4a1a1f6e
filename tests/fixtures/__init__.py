# tests/fixtures/__init__.py
"""
HTML pages and feed payloads shared by the test suite.

- articles: Business-Insider-style article pages and fragments
- feeds: regional feed and keyword-search JSON bodies
"""
