"""
chatscreen test suite.

Tests are organized by layer:
    tests/unit/         Unit tests (no network, fast)
    tests/integration/  CLI tests through click's CliRunner
    tests/safety/       Interface freeze guards for BaseChannel

Run all tests:
    pytest

Run unit tests only:
    pytest tests/unit/
"""
