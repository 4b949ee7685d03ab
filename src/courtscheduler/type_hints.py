"""Type hints used in Court Scheduler."""

from typing import List, Tuple

# Participant identifier in [0, N)
Participant = int
# Dense match identifier in [1, TotalMatches]
MatchId = int
# Canonical match: larger participant first
Match = Tuple[Participant, Participant]
# One (min, max) pair inside a pairing
PairingPair = Tuple[int, int]
# One perfect matching of a court group, pairs sorted
Pairing = Tuple[PairingPair, ...]
# Flattened position pattern of a pairing, usable as a rearrange order
PositionPattern = Tuple[int, ...]
# Match ids assigned to one week, one per slot
WeekSchedule = List[MatchId]

#  LocalWords:  MatchId PairingPair
