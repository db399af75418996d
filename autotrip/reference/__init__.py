# Reference data package for the autotrip engine
"""
Automobile reference tables and the lookups the models use to reach them.

    records  — frozen record types (fuels, makes, size classes, countries, ...)
    lookup   — ReferenceData protocol and the in-memory implementation
    defaults — injected fallback records (world averages)
    loader   — JSON reference documents
    sample   — a small bundled dataset for demos and tests
"""
