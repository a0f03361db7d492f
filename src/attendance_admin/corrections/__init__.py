"""Correction Request Module.

Reads time-correction requests from the platform and reconciles their
heterogeneous, optionally-missing or order-inverted timestamp fields into
one canonical CorrectionRecord.

Architecture: Clean Architecture with Hexagonal (Ports & Adapters)
"""
