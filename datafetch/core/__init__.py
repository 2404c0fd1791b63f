"""Core Layer — descriptors, tri-state inputs, errors. No IO, no threads.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Capabilities (conversion, scheduling) reached only through boundary_protocols
"""
