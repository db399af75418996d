# Decision package for the autotrip engine
"""
Quorum-based fallback inference.

Committees of ranked quorums, a registry that holds them per model, and
the engine that resolves quantities recursively with memoization and a
full provenance trace.
"""
