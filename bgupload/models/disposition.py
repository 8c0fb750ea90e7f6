"""
Processing dispositions.

The three-way outcome of one processing call, consumed by whatever
mechanism invoked the worker:

Finished: every resource uploaded
RetryAfter: invoke again after `delay` seconds
FailedTerminal: give up and surface `error`

Dependencies: dataclasses (stdlib)
System role: Return contract of the process entry point
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Finished:
    pass


@dataclass(frozen=True)
class RetryAfter:
    delay: float


@dataclass(frozen=True)
class FailedTerminal:
    error: BaseException


Disposition = Union[Finished, RetryAfter, FailedTerminal]
