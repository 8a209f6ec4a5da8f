"""
Unit Tests for chess-uci

This package contains unit tests for all driver components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_parser.py

    # Run with coverage
    pytest tests/ --cov=chess_uci --cov-report=html

    # Run specific test
    pytest tests/test_score.py::TestNormalize::test_centipawn_display

Most tests drive the Engine through FakeProcess (tests/fakes.py), an
in-memory stand-in for the engine process. test_process.py spawns a small
Python UCI engine through the current interpreter.

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
