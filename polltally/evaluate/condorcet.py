'''Condorcet evaluation of ranked polls by the Schulze method.

The Schulze method (also called beatpath method or Schwartz sequential
dropping) examines pairwise preferences between options - the weight of
voters ranking one option strictly above another - and ranks the options by
the strength of the strongest paths of pairwise wins between them. It
always ranks a Condorcet winner (an option that beats all others pairwise)
first and alone.

Matrices are kept as flat lists in row-major order: the entry for the pair of
options ``(i, j)`` of an ``n``-option poll is at ``i * n + j``.

All entries are sums of voter weights. With voter weights bounded by
:data:`polltally.util.MAX_WEIGHT`, a preference can only overflow the signed
64-bit range with more than four billion voters; the sums are checked
nevertheless and raise :class:`polltally.exceptions.ArithmeticOverflow`.
'''

import logging
from typing import List, Optional, Sequence, Tuple

import polltally.aggregate
import polltally.util
from polltally.poll import SchulzePoll
from polltally.result import SchulzeResult
from polltally.evaluate.core import PollEvaluator, evaluator_mark
from polltally.persist import simple_serialization


logger = logging.getLogger(__name__)


def pairwise_wins(matrix: Sequence[int],
                  n_options: int,
                  ) -> List[Tuple[int, int]]:
    '''Select pairs of options where the first beats the second.

    :param matrix: A preference or strongest path matrix in row-major order.
    :param n_options: Number of options (rows) in the matrix.
    :returns: Ordered pairs ``(i, j)`` with ``matrix[i, j] > matrix[j, i]``.
    '''
    return [
        (i, j)
        for i in range(n_options)
        for j in range(n_options)
        if matrix[i * n_options + j] > matrix[j * n_options + i]
    ]


def beat_counts(matrix: Sequence[int], n_options: int) -> List[int]:
    '''Count the number of options every option beats in the matrix.'''
    n_beats = [0] * n_options
    for winner, loser in pairwise_wins(matrix, n_options):
        n_beats[winner] += 1
    return n_beats


def condorcet_winner(preferences: Sequence[int],
                     n_options: int,
                     ) -> Optional[int]:
    '''Return the option that pairwise beats all others, or None.

    :param preferences: A preference matrix in row-major order.
    :param n_options: Number of options.
    '''
    for option, n_beats in enumerate(beat_counts(preferences, n_options)):
        if n_beats == n_options - 1:
            return option
    return None


@evaluator_mark
@simple_serialization
class Schulze(PollEvaluator):
    '''Schulze (beatpath) evaluator of ranked polls.

    Finds paths between pairs of options in which each option pairwise beats
    the next, takes the weakest link of each path as its strength and ranks
    the options by how many others they beat on the strongest paths.
    Options beating equally many others form a tie class.

    Options a voter left unranked are considered tied below all options the
    voter did rank.
    '''
    poll_type = 'schulze'
    aggregator = polltally.aggregate.SchulzeVoteAggregator()

    def evaluate_tally(self,
                       poll: SchulzePoll,
                       tally: polltally.aggregate.SchulzeTally,
                       ) -> SchulzeResult:
        '''Rank the options given the collected rankings.

        :param poll: The tallied poll.
        :param tally: Weighted position vectors of the voters.
        '''
        n_options = tally.n_options
        preferences = self.preference_matrix(tally)
        paths = self.widest_paths(preferences, n_options)
        ranking = self.rank(paths, n_options)
        winner = condorcet_winner(preferences, n_options)
        if winner is not None:
            logger.debug('poll %r: option %d is the Condorcet winner',
                         poll.poll_id, winner)
        return SchulzeResult(
            poll_id=poll.poll_id,
            ranking=ranking,
            preferences=tuple(preferences),
            strongest_paths=tuple(paths),
        )

    @staticmethod
    def preference_matrix(tally: polltally.aggregate.SchulzeTally
                          ) -> List[int]:
        '''Sum the weights of voters preferring one option to another.

        For every ballot and every pair of options where the first one has a
        strictly lower position (or the second one is unranked while the
        first one is not), the full ballot weight is added to the pair.
        '''
        n_options = tally.n_options
        prefs = [0] * (n_options * n_options)
        for positions, weight in tally.ballots:
            if weight == 0:
                continue
            for upper, upper_pos in enumerate(positions):
                if upper_pos is None:
                    continue
                row = upper * n_options
                for lower, lower_pos in enumerate(positions):
                    if lower_pos is None or upper_pos < lower_pos:
                        prefs[row + lower] = polltally.util.checked_add(
                            prefs[row + lower], weight
                        )
        return prefs

    @staticmethod
    def widest_paths(preferences: Sequence[int],
                     n_options: int,
                     ) -> List[int]:
        '''Compute the strongest path matrix from a preference matrix.

        Starts from the direct pairwise wins (a pair that is not won gets
        zero) and widens the paths through every intermediate option in
        turn, Floyd-Warshall style, in ``O(n^3)``.
        '''
        paths = [0] * (n_options * n_options)
        for i, j in pairwise_wins(preferences, n_options):
            paths[i * n_options + j] = preferences[i * n_options + j]
        for via in range(n_options):
            via_row = via * n_options
            for start in range(n_options):
                if start == via:
                    continue
                start_row = start * n_options
                to_via = paths[start_row + via]
                if to_via == 0:
                    continue
                for end in range(n_options):
                    if end == start or end == via:
                        continue
                    through = min(to_via, paths[via_row + end])
                    if through > paths[start_row + end]:
                        paths[start_row + end] = through
        return paths

    @staticmethod
    def rank(paths: Sequence[int],
             n_options: int,
             ) -> Tuple[Tuple[int, ...], ...]:
        '''Order the options into tie classes by strongest path wins.

        :param paths: The strongest path matrix in row-major order.
        :param n_options: Number of options.
        :returns: Tie classes of option indices, best first.
        '''
        n_beats = beat_counts(paths, n_options)
        order = sorted(range(n_options), key=lambda opt: -n_beats[opt])
        ranking = []
        last_beats = None
        for option in order:
            if n_beats[option] != last_beats:
                ranking.append([])
                last_beats = n_beats[option]
            ranking[-1].append(option)
        return tuple(tuple(group) for group in ranking)
