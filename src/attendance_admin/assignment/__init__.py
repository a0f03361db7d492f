"""Site Assignment & Relocation Module.

This module provides the reconciliation and bulk-mutation core of the
admin console:
- Compute the delta between a manager's current and desired sites
- Apply it as ordered remote add/remove calls, stopping on first failure
- Move a batch of employees to one site, isolating per-item failures

Architecture: Clean Architecture with Hexagonal (Ports & Adapters)
"""
