"""A commandline tool to tally a poll from a JSON snapshot.

Recomputes the result of a basic, median or Schulze poll from a snapshot of
its definition, voters and votes, e.g. to audit an archived result.
"""

import argparse
import io
import logging
import sys
from typing import Any

import polltally.evaluate
import polltally.io.snapshot
from polltally.exceptions import TallyError
from polltally.io.core import ParseError
from polltally.poll import Poll
from polltally.result import BasicResult, MedianResult, SchulzeResult

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the poll snapshot from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the poll snapshot from standard input',
)
argparser.add_argument(
    '-f', '--output-format',
    choices=['text', 'json'],
    default='text',
    help='format of the printed result',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all evaluator log messages and other info',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any evaluator log messages or other info',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         output_format: str = 'text',
         verbose: bool = False,
         quiet: bool = False,
         ) -> Any:
    """Tally the poll from the snapshot file and print its result."""
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    snapshot = polltally.io.snapshot.load(input_file)
    result = polltally.evaluate.tally(snapshot.poll, snapshot.votes)
    if output_format == 'json':
        polltally.io.snapshot.dump_result(sys.stdout, result)
    else:
        show_poll(snapshot.poll, len(snapshot.votes))
        print()
        show_result(snapshot.poll, result)
    return result


def show_poll(poll: Poll, n_votes: int) -> None:
    kind = 'absolute' if poll.majority.absolute else 'relative'
    print(f'Tallying {poll.poll_type} poll {poll.name!r}')
    print(f'Received {n_votes} votes')
    print(f'Required {kind} majority: {poll.majority.format()}')


def show_result(poll: Poll, result: Any) -> None:
    """Show the result of a single poll in a human readable form."""
    if isinstance(result, BasicResult):
        print('Outcome:', result.outcome.value)
        for label, count, weight in [
            ('Yes', result.n_yes, result.yes_weight),
            ('No', result.n_no, result.no_weight),
            ('Abstain', result.n_abstain, result.abstain_weight),
        ]:
            print(f'{label.ljust(10)} {count} votes, weight {weight}')
    elif isinstance(result, MedianResult):
        if result.settled:
            print('Settled value:', result.settled_value, result.currency)
        else:
            print('No value reached the required majority')
        if result.truncated:
            print('Truncated votes of:',
                  ', '.join(str(voter) for voter in result.truncated))
    elif isinstance(result, SchulzeResult):
        left_col = [str(i) for i in range(1, len(result.ranking) + 1)]
        n_just_chars = len(max(left_col, key=len, default=''))
        for left, group in zip(left_col, result.ranking):
            names = ', '.join(poll.options[option] for option in group)
            print(left.rjust(n_just_chars), ' ', names)
    else:
        raise ValueError(f'unknown result type: {result!r}')


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        try:
            main(**vars(args))
        except (TallyError, ParseError) as err:
            logging.error('cannot tally poll: %s', err)
            sys.exit(1)
