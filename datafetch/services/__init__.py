"""Services Layer — coercion, argument resolution, invocation, fetcher registry.

Invariants:
    - Each service receives its collaborators through the constructor
    - Fetcher registration uses an explicit dict (no auto-discovery)
"""
