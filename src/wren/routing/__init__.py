"""Routing: file-path parsing, priority ordering, and first-match lookup.

Routes are parsed from the pages tree, sorted once by priority, and
published as an immutable table that every render reads from.
"""
