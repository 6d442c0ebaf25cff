"""
pogoprofile Test Suite
======================

Test Organization
-----------------
- tests/unit/          : Fast unit tests against an in-memory dispatcher
- tests/unit/domain/   : Pure domain model tests (no dispatcher)
"""
