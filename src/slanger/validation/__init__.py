"""Validation layer: rule-based consistency checks over a Document.

Pure functions, one pass per module plus a cross-module pass, composed
by :mod:`slanger.validation.engine`. Malformed-but-present input becomes
ValidationIssue values; absent structure raises StructuralError.

This layer depends only on the domain layer.
"""
