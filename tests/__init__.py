"""
Test suite for tokensale

Contains:
- tests/unit/   : Unit tests for individual modules, gates and components
- tests/fakes.py: In-memory asset, price feed, clock and a wired sale deployment
"""
