from courtscheduler.pairing.match_index import MatchIndex
from courtscheduler.pairing.enumerator import (
    PairingEnumerator,
    double_factorial,
    rearrange,
)

__all__ = [
    "MatchIndex",
    "PairingEnumerator",
    "double_factorial",
    "rearrange",
]
