"""
Test suite for sukashi

Contains:
- tests/unit/          : Unit tests for the retention core, contracts and planner
"""
