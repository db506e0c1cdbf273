"""Hierarchical snapshot-diff engine.

Compares a "latest" and a "baseline" snapshot tree and records every
detected delta in a hash-keyed change graph with full path provenance.

Submodules:
    hashing       -- Canonical JSON content hashes and change-node identities.
    myers         -- Myers shortest edit script over arbitrary sequences.
    graph         -- ChangeGraph node arena, DFS traversal and level-4 grouping.
    engine        -- difference(): hash-guided level-by-level tree comparator.
    cancellation  -- Nets out values that were removed and re-inserted.
    filters       -- Allow/deny criteria that mark leaf changes as canceled.
"""
