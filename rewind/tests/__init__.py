"""
Test suite for the lifted-state engine.

Focus areas:
- Fold cache correctness and minimal recomputation
- Checkpoint / rollback / reset protocol
- maxAge auto-commit gated by reducer errors
- Import / export wire format
"""
