"""Core contracts shared by every vconfig layer.

This module holds errors, settings, logging and structural validation.
It has no dependency on the storage layer.
"""
