"""Storage layer for versioned config records.

This module encodes dataclass records as JSON files and reads them back.
It powers version peeking, cached access, and migration workflows.
"""
