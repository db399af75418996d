# CLI package for the autotrip engine
"""
Command-line interface for evaluating trips locally.

Commands:
    autotrip evaluate    — Resolve one quantity
    autotrip explain     — Show the resolution trace
    autotrip committees  — List committees and quorums
"""
