"""
Unit Tests for the Tutor Engine

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_search.py

    # Skip the multi-second end-to-end searches
    pytest tests/ -m "not slow"

Dependencies:
    - pytest: Test framework
"""
