import random

import pytest

from courtscheduler.exceptions import (
    IndexOutOfRangeException,
    InvalidConfigurationException,
)
from courtscheduler.pairing.enumerator import (
    PairingEnumerator,
    double_factorial,
    rearrange,
)


def _normalized(flat):
    return tuple(
        sorted((min(a, b), max(a, b)) for a, b in zip(flat[0::2], flat[1::2]))
    )


def test_double_factorial():
    assert double_factorial(0) == 1
    assert double_factorial(1) == 1
    assert double_factorial(3) == 3
    assert double_factorial(7) == 105


def test_group_of_four_drops_the_baseline():
    enumerator = PairingEnumerator([0, 1, 2, 3])

    assert enumerator.raw_count == 3
    assert len(enumerator) == 2
    assert enumerator.pairings == (
        ((0, 2), (1, 3)),
        ((0, 3), (1, 2)),
    )
    assert enumerator.find([(0, 1), (2, 3)]) == -1


def test_without_forbidden_pairs_every_matching_is_kept():
    enumerator = PairingEnumerator([0, 1, 2, 3], forbidden=[])
    assert enumerator.count() == 3


@pytest.mark.parametrize("size", [2, 4, 6, 8])
def test_raw_count_is_double_factorial(size):
    enumerator = PairingEnumerator(list(range(size)), forbidden=[])
    assert enumerator.raw_count == double_factorial(size - 1)
    assert len(enumerator) == double_factorial(size - 1)
    assert enumerator.validate()


def test_group_of_eight_avoiding_baseline():
    enumerator = PairingEnumerator(list(range(8)))

    assert enumerator.raw_count == 105
    # Matchings of K8 sharing no edge with a fixed perfect matching
    assert len(enumerator) == 60
    assert enumerator.validate()
    for pairing in enumerator.pairings:
        assert not set(pairing) & {(0, 1), (2, 3), (4, 5), (6, 7)}


def test_lookup_helpers():
    enumerator = PairingEnumerator([0, 1, 2, 3])

    assert enumerator.find([(3, 1), (2, 0)]) == 0
    assert enumerator.pairing_as_list(0) == [0, 2, 1, 3]
    assert enumerator.contains_pair(1, 3, 0)
    assert not enumerator.contains_pair(1, 0, 2)
    assert not enumerator.contains_pair(5, 0, 3)

    with pytest.raises(IndexOutOfRangeException):
        enumerator.pairing_at(2)
    with pytest.raises(IndexOutOfRangeException):
        enumerator.pattern_at(-1)


def test_patterns_reproduce_their_pairings():
    elements = [4, 9, 6, 1, 12, 3]
    enumerator = PairingEnumerator(elements)

    for index, pattern in enumerate(enumerator.patterns):
        arranged = rearrange(elements, pattern)
        assert _normalized(arranged) == enumerator.pairing_at(index)


def test_invalid_groups_are_rejected():
    with pytest.raises(InvalidConfigurationException):
        PairingEnumerator([0, 1, 2])
    with pytest.raises(InvalidConfigurationException):
        PairingEnumerator([])
    with pytest.raises(InvalidConfigurationException):
        PairingEnumerator([0, 1, 1, 2])


def test_rearrange_is_a_permutation():
    rng = random.Random(5)
    for _ in range(20):
        order = list(range(8))
        rng.shuffle(order)
        result = rearrange(list(range(8)), order)

        assert sorted(result) == list(range(8))
        for j in range(0, 8, 2):
            assert result[j] >= result[j + 1]


def test_rearrange_identity_only_orients_pairs():
    assert rearrange([0, 1, 2, 3], [0, 1, 2, 3]) == [1, 0, 3, 2]


def test_rearrange_rejects_bad_orders():
    with pytest.raises(IndexOutOfRangeException):
        rearrange([0, 1, 2, 3], [0, 1, 2])
    with pytest.raises(IndexOutOfRangeException):
        rearrange([0, 1, 2, 3], [0, 1, 2, 4])
    with pytest.raises(IndexOutOfRangeException):
        rearrange([0, 1, 2, 3], [0, 1, 1, 2])
