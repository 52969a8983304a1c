"""Test package for Lumina.

Structure:
    - unit/: Individual function and class tests
    - integration/: HTTP-level tests against the in-process app

The completion source is replaced by scripted fakes (tests/fakes.py), so no
test calls a live model. Leverages pytest with pytest-check for soft assertions.
"""
