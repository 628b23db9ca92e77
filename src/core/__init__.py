"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks of the retention
algorithm that are independent of external systems (filesystems, trash, CLI).
"""
