'''Evaluate the results of polls.

Every poll type has an evaluator here that aggregates the votes of a poll
with the matching aggregator from :mod:`polltally.aggregate` and turns the
tally into a result from :mod:`polltally.result`:

-   :mod:`basic` decides yes/no questions by the majority rule of the poll,
-   :mod:`median` settles an amount by a weighted median,
-   :mod:`condorcet` ranks options by the Schulze method.

The evaluators are pure functions of their input: they keep no state between
calls, so the same poll and votes always give an equal result and different
polls may be tallied concurrently. Use :func:`core.tally` to dispatch a poll
to the evaluator of its type.
'''

from polltally.evaluate.core import *    # noqa
import polltally.evaluate.basic    # noqa: F401
import polltally.evaluate.median    # noqa: F401
import polltally.evaluate.condorcet    # noqa: F401
