# autotrip Engine
# Automobile trip emission estimates with full provenance

"""
Every estimate is reached by ranked fallback: each quantity has a
committee of methods, most preferred first, and the first method whose
inputs are known (and whose compliance tags fit the request) decides it.
Every value carries a record of where it came from.
"""

__version__ = "0.1.0"
