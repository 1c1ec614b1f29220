"""
Core domain models, fixed-point arithmetic, access control and invariants.

This module contains the foundational building blocks that are independent
of concrete assets and price feeds.
"""
