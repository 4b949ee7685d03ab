"""Perfect matching enumeration for court groups."""

# Court Scheduler
# Copyright (C) 2025  Court Scheduler developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Dict, Iterable, List, Optional, Sequence

from courtscheduler.exceptions import (
    IndexOutOfRangeException,
    InvalidConfigurationException,
)
from courtscheduler.models.season_config import consecutive_pairs
from courtscheduler.type_hints import Pairing, PairingPair, PositionPattern


def double_factorial(n: int) -> int:
    """Return n!! = n * (n - 2) * ... (1 for n <= 0).

    A group of ``k`` elements has ``(k - 1)!!`` perfect matchings.
    """
    result = 1
    while n > 1:
        result *= n
        n -= 2
    return result


def rearrange(sequence: Sequence[int], order: Sequence[int]) -> List[int]:
    """Scatter ``sequence`` into the positions given by ``order``.

    ``sequence[i]`` lands at ``rearranged[order[i]]``. Afterwards every
    adjacent pair ``(rearranged[2j], rearranged[2j + 1])`` is swapped so
    that the larger participant comes first, matching the canonical
    match form.

    Args:
        sequence: Flat participant values, two per match
        order: A permutation of ``range(len(sequence))``

    Returns:
        The rearranged participant list

    Raises:
        IndexOutOfRangeException: If the lengths differ or ``order`` is not
            a permutation of valid positions
    """
    if len(sequence) != len(order):
        raise IndexOutOfRangeException(
            f"Sequence and order must be the same length: "
            f"{len(sequence)} != {len(order)}"
        )

    size = len(sequence)
    rearranged: List[Optional[int]] = [None] * size
    for value, position in zip(sequence, order):
        if position < 0 or position >= size:
            raise IndexOutOfRangeException(f"Invalid order index: {position}")
        if rearranged[position] is not None:
            raise IndexOutOfRangeException(
                f"Order index {position} used more than once"
            )
        rearranged[position] = value

    for i in range(0, size - 1, 2):
        if rearranged[i] < rearranged[i + 1]:
            rearranged[i], rearranged[i + 1] = rearranged[i + 1], rearranged[i]
    return rearranged


def _scatter_order(positions: Sequence[int]) -> PositionPattern:
    # Inverse permutation: position positions[i] is filled from slot i
    order = [0] * len(positions)
    for i, position in enumerate(positions):
        order[position] = i
    return tuple(order)


class PairingEnumerator:
    """All perfect matchings of an even-sized group, minus a baseline.

    Every pairing is a tuple of ``(min, max)`` pairs sorted by first then
    second element. Pairings containing any forbidden pair are dropped,
    the rest are sorted and de-duplicated, giving a deterministic order
    that the randomized scheduler walks front to back.

    Alongside each pairing the enumerator keeps its *position pattern*:
    the order that makes :func:`rearrange` group a flat sequence the way
    the pairing groups the court's positions. For the pairing whose
    flattened positions are ``P``, ``rearrange(seq, pattern)`` yields
    ``[seq[P[0]], seq[P[1]], ...]`` (up to the in-pair swap), so the
    consecutive-pair baseline corresponds to the identity order.
    """

    def __init__(
        self,
        elements: Sequence[int],
        forbidden: Optional[Iterable[PairingPair]] = None,
    ):
        """Enumerate the pairings of ``elements``.

        Args:
            elements: Ordered, even-sized, duplicate free group
            forbidden: Pairs that disqualify a pairing. Defaults to the
                consecutive pairs of ``elements``.

        Raises:
            InvalidConfigurationException: On odd, empty or repeating groups
        """
        self.elements = tuple(elements)
        if not self.elements or len(self.elements) % 2 != 0:
            raise InvalidConfigurationException(
                f"Number of elements must be even and non-zero: {len(self.elements)}"
            )
        if len(set(self.elements)) != len(self.elements):
            raise InvalidConfigurationException(
                f"Group elements must be distinct: {list(self.elements)}"
            )

        if forbidden is None:
            forbidden = consecutive_pairs(self.elements)
        self.forbidden = frozenset((min(a, b), max(a, b)) for a, b in forbidden)

        raw = self._enumerate()
        self.raw_count = len(raw)

        kept = [
            pairing
            for pairing in raw
            if not any(pair in self.forbidden for pair in pairing)
        ]
        kept.sort()
        unique: List[Pairing] = []
        for pairing in kept:
            if not unique or unique[-1] != pairing:
                unique.append(pairing)

        position = {element: i for i, element in enumerate(self.elements)}
        self._pairings = tuple(unique)
        self._patterns = tuple(
            _scatter_order([position[p] for pair in pairing for p in pair])
            for pairing in self._pairings
        )
        self._lookup: Dict[Pairing, int] = {
            pairing: i for i, pairing in enumerate(self._pairings)
        }

    def _enumerate(self) -> List[Pairing]:
        # Positions still free are tracked in a bitmask; the lowest free
        # position is paired with every other free position in turn.
        elements = self.elements
        current: List[PairingPair] = [(0, 0)] * (len(elements) // 2)
        results: List[Pairing] = []

        def recurse(available: int, depth: int) -> None:
            if not available:
                results.append(tuple(sorted(current)))
                return
            low_bit = available & -available
            first = low_bit.bit_length() - 1
            rest = available ^ low_bit
            candidates = rest
            while candidates:
                bit = candidates & -candidates
                second = bit.bit_length() - 1
                a, b = elements[first], elements[second]
                current[depth] = (min(a, b), max(a, b))
                recurse(rest ^ bit, depth + 1)
                candidates ^= bit

        recurse((1 << len(elements)) - 1, 0)
        return results

    @property
    def pairings(self):
        return self._pairings

    @property
    def patterns(self):
        return self._patterns

    def __len__(self) -> int:
        return len(self._pairings)

    def count(self) -> int:
        return len(self._pairings)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._pairings):
            raise IndexOutOfRangeException(
                f"Index: {index}, Size: {len(self._pairings)}"
            )

    def pairing_at(self, index: int) -> Pairing:
        self._check_index(index)
        return self._pairings[index]

    def pattern_at(self, index: int) -> PositionPattern:
        self._check_index(index)
        return self._patterns[index]

    def pairing_as_list(self, index: int) -> List[int]:
        """Flatten pairing ``index`` into ``[a0, b0, a1, b1, ...]``."""
        return [p for pair in self.pairing_at(index) for p in pair]

    def find(self, pairing: Iterable[Sequence[int]]) -> int:
        """Index of ``pairing`` (pairs in any orientation or order), -1 if absent."""
        key = tuple(sorted((min(a, b), max(a, b)) for a, b in pairing))
        return self._lookup.get(key, -1)

    def contains_pair(self, index: int, a: int, b: int) -> bool:
        if index < 0 or index >= len(self._pairings):
            return False
        return (min(a, b), max(a, b)) in self._pairings[index]

    def validate(self) -> bool:
        """Check that every pairing is unique and uses each element once."""
        expected = sorted(self.elements)
        seen = set()
        for pairing in self._pairings:
            if pairing in seen:
                return False
            seen.add(pairing)
            if sorted(p for pair in pairing for p in pair) != expected:
                return False
        return True
