"""
Bookish Test Suite

Tests are organized into:
- unit/: Unit tests for individual components
- integration/: API tests through the ASGI app with fake providers
"""
