"""Caller-side migration orchestration.

This module upgrades stored configs through caller-registered steps.
Version semantics stay with the caller; no ordering is inferred.
"""
