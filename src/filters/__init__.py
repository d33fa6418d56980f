"""Filter validation and normalization.

Structured filter maps (from request parameters or from the natural-language parser) are turned
into a typed `PredicateSet` that the SQL builder translates for the storage layer.
"""
