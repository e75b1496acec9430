'''Majority rules - the weight fraction a poll outcome must reach.

A majority rule is a fraction (such as one half or two thirds) together with
the base it is measured against:

-   an **absolute** majority is measured against the total weight of all
    approved voters who cast a vote in the poll, so abstentions count
    against the proposal;
-   a **relative** (simple) majority is measured against the weight of the
    valid votes only.

All comparisons are made by cross-multiplication in exact integers that are
kept inside the signed 64-bit range.
'''

from fractions import Fraction
from typing import Any

import polltally.util
from polltally.exceptions import InvalidMajorityConfiguration
from polltally.persist import simple_serialization


@simple_serialization
class MajorityRule:
    '''A required fraction of weight for a poll outcome.

    The rule is validated eagerly, so an invalid rule never reaches a tally.

    :param numerator: Numerator of the required fraction, at least 1.
    :param denominator: Denominator of the required fraction, at least 1 and
        no smaller than the numerator.
    :param absolute: Whether to measure against the weight of all eligible
        voters (True) or only against the weight of valid votes (False).
    :raises InvalidMajorityConfiguration: If the fraction is not an integer
        fraction in the ``(0, 1]`` range representable in the database.
    '''
    def __init__(self,
                 numerator: int,
                 denominator: int,
                 absolute: bool = False,
                 ):
        self._check(numerator, denominator)
        if not isinstance(absolute, bool):
            raise InvalidMajorityConfiguration(
                numerator, denominator,
                f'absolute flag must be a bool, got {absolute!r}'
            )
        self.numerator = numerator
        self.denominator = denominator
        self.absolute = absolute

    @staticmethod
    def _check(numerator: Any, denominator: Any) -> None:
        if not (polltally.util.is_integer(numerator)
                and polltally.util.is_integer(denominator)):
            reason = 'numerator and denominator must be integers'
        elif denominator < 1:
            reason = 'denominator must be positive'
        elif numerator < 1:
            reason = 'numerator must be positive'
        elif numerator > denominator:
            reason = 'cannot require more than all of the weight'
        elif denominator > polltally.util.MAX_WEIGHT:
            reason = f'denominator must be <= {polltally.util.MAX_WEIGHT}'
        else:
            return
        raise InvalidMajorityConfiguration(numerator, denominator, reason)

    @classmethod
    def parse(cls, text: str, absolute: bool = False) -> 'MajorityRule':
        '''Parse a majority rule from its ``numerator/denominator`` form.

        :param text: The fraction, e.g. ``'2/3'``.
        :param absolute: Whether the rule is an absolute majority.
        :raises InvalidMajorityConfiguration: If the string is not a valid
            fraction.
        '''
        parts = text.split('/')
        if len(parts) != 2:
            raise InvalidMajorityConfiguration(
                text, None, 'must be in the form "a/b"'
            )
        numer_str, denom_str = (part.strip() for part in parts)
        if not all(part.isascii() and part.isdigit()
                   for part in (numer_str, denom_str)):
            raise InvalidMajorityConfiguration(
                numer_str, denom_str, 'must be non-negative integers'
            )
        return cls(int(numer_str), int(denom_str), absolute=absolute)

    def format(self) -> str:
        '''Return the fraction in the ``numerator/denominator`` form.'''
        return f'{self.numerator}/{self.denominator}'

    def as_fraction(self) -> Fraction:
        return Fraction(self.numerator, self.denominator)

    def is_satisfied(self,
                     achieved_weight: int,
                     eligible_weight: int,
                     total_valid_weight: int,
                     ) -> bool:
        '''Determine whether the achieved weight reaches the majority.

        Without any valid weight, the rule is never satisfied (even a zero
        weight would otherwise reach any fraction of zero).

        :param achieved_weight: Weight supporting the outcome in question.
        :param eligible_weight: Weight of all voters eligible for the poll;
            the base for absolute majorities.
        :param total_valid_weight: Weight of all valid votes; the base for
            relative majorities.
        :raises ArithmeticOverflow: If the cross products do not fit into
            64 bits.
        '''
        if total_valid_weight == 0:
            return False
        base = eligible_weight if self.absolute else total_valid_weight
        return (
            polltally.util.checked_mul(achieved_weight, self.denominator)
            >= polltally.util.checked_mul(self.numerator, base)
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, MajorityRule):
            return NotImplemented
        return (
            self.numerator == other.numerator
            and self.denominator == other.denominator
            and self.absolute == other.absolute
        )

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator, self.absolute))

    def __repr__(self) -> str:
        kind = 'absolute' if self.absolute else 'relative'
        return f'<MajorityRule({self.format()}, {kind})>'


SIMPLE_MAJORITY = MajorityRule(1, 2)
TWO_THIRDS_MAJORITY = MajorityRule(2, 3)
