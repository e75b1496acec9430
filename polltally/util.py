'''Various utility functions for other modules of polltally.

Mainly exact integer arithmetic bounded to the signed 64-bit range. Python
integers never wrap, so the bounds are checked explicitly to keep tallies
reproducible by any consumer that stores them in 64-bit columns.

There should normally be no need to use these functions directly.
'''

import operator
from typing import Any, Iterable, List, Tuple

from polltally.exceptions import ArithmeticOverflow


INT64_MAX = 2 ** 63 - 1
INT64_MIN = -2 ** 63

# database integer columns hold 2147483647, two values are kept spare
MAX_WEIGHT = 2147483647 - 2


def is_integer(value: Any) -> bool:
    '''Return True for integers proper (booleans are not accepted).'''
    return isinstance(value, int) and not isinstance(value, bool)


def check_int64(value: int, what: str = 'value') -> int:
    '''Return the value if it fits into a signed 64-bit integer.

    :raises ArithmeticOverflow: If it does not.
    '''
    if value > INT64_MAX or value < INT64_MIN:
        raise ArithmeticOverflow(f'{what} {value} out of 64-bit range')
    return value


def checked_add(value1: int, value2: int) -> int:
    return check_int64(value1 + value2, 'sum')


def checked_mul(value1: int, value2: int) -> int:
    return check_int64(value1 * value2, 'product')


def checked_sum(values: Iterable[int]) -> int:
    '''Sum integers, failing as soon as a partial sum overflows.'''
    total = 0
    for value in values:
        total = checked_add(total, value)
    return total


def sorted_by_value(pairs: Iterable[Tuple[int, int]]
                    ) -> List[Tuple[int, int]]:
    '''Return (value, weight) pairs sorted by value in ascending order.

    The sort is stable so pairs with equal values keep their input order.
    '''
    return list(sorted(pairs, key=operator.itemgetter(0)))
