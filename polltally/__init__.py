"""Polltally - a library for tallying the polls of an organization's meetings.

Polltally objects compute the official results of the polls put to the
voters of a meeting, be it a yes/no question, an amount of money to settle
or a ranking of several options.

A poll tally involves the following:

-   What the question is and what majority it needs. This is described by the
    poll classes in the ``poll`` module and the majority rules from the
    ``majority`` module (a fraction measured against either all eligible
    voters or just the valid votes).
-   Who voted, with what weight, and how. The ``vote`` module holds the
    voters and the vote types for each kind of poll; the ``aggregate`` module
    checks the votes and sums their weights.
-   What the outcome is. This is the task of the ``evaluate`` subpackage:
    majority decisions for basic polls, weighted medians for median polls
    and the Schulze method for ranked polls. Its :func:`evaluate.tally`
    function dispatches any poll to the right evaluator.

The results from the ``result`` module are immutable and can be archived with
the ``persist`` module. Tallying is a pure function of the poll and its votes,
so an archived result can always be checked by tallying again, for example
with the ``python -m polltally`` commandline tool.
"""
