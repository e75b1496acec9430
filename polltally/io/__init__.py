"""Input/output of poll snapshots and results.

This subpackage is structured into modules by file format. Currently, the
JSON poll snapshot (:mod:`polltally.io.snapshot`) is supported: a poll
definition with its voter register and collected votes, as exported for an
audit recomputation of an archived result.
"""
