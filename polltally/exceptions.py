'''Errors raised while tallying polls.

All errors are subclasses of :class:`TallyError`. They are deterministic
functions of the input: tallying the same poll and votes again raises the same
error, so none of them is worth retrying without correcting the input first.

-   :class:`ConfigurationError` (and its subclass
    :class:`InvalidMajorityConfiguration`) signals a poll definition that
    cannot be tallied at all.
-   :class:`MalformedVote` signals a vote that breaks the rules of its poll;
    this is a data integrity problem upstream.
-   :class:`ArithmeticOverflow` signals weight sums outside the supported
    numeric range.
'''

from typing import Any, Optional


class TallyError(Exception):
    '''A poll cannot be tallied with the given input.'''
    pass


class ConfigurationError(TallyError):
    '''A poll definition is invalid.'''
    pass


class InvalidMajorityConfiguration(ConfigurationError):
    '''A majority rule violates its invariants.

    :param numerator: Numerator of the rejected rule.
    :param denominator: Denominator of the rejected rule.
    :param reason: What is wrong with the rule.
    '''
    def __init__(self, numerator: Any, denominator: Any, reason: str):
        self.numerator = numerator
        self.denominator = denominator
        self.reason = reason
        super().__init__(
            f'invalid majority {numerator!r}/{denominator!r}: {reason}'
        )


class MalformedVote(TallyError):
    '''A vote is inconsistent with the poll it was cast in.

    The whole tally is aborted when this is raised; the offending voter is
    identified so that the bad record can be tracked down.

    :param voter_id: Identifier of the voter who cast the vote.
    :param reason: What is wrong with the vote.
    :param value: The offending part of the vote, if it can be pinpointed.
    '''
    def __init__(self,
                 voter_id: Any,
                 reason: str,
                 value: Optional[Any] = None,
                 ):
        self.voter_id = voter_id
        self.reason = reason
        self.value = value
        message = f'malformed vote of voter {voter_id!r}: {reason}'
        if value is not None:
            message += f' ({value!r})'
        super().__init__(message)


class ArithmeticOverflow(TallyError):
    '''A weight sum or product left the signed 64-bit range.'''
    pass
