"""
Test Suite
==========

Test suite matching the amp_story/ package structure.

Test Categories:
- unit: Unit tests for individual components
"""
