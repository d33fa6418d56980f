"""Natural-language query parsing.

The intent layer converts an English free-text query into the raw filter map accepted by
`src.filters.builder.build_predicates`.
"""
