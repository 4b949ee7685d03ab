import pytest

from courtscheduler.exceptions import InvalidConfigurationException
from courtscheduler.models.season_config import (
    CourtGroup,
    SeasonConfig,
    default_court_groups,
)


def test_reference_season():
    config = SeasonConfig.reference()

    assert config.num_participants == 16
    assert config.num_weeks == 7
    assert [g.name for g in config.court_groups] == [
        "Main A",
        "Main B",
        "Main C",
        "Main D",
    ]
    assert config.matches_per_week == 8
    assert config.target_matches == 56
    assert config.total_possible_matches == 120
    forbidden = config.forbidden_pairs()
    assert len(forbidden) == 8
    assert (0, 1) in forbidden and (14, 15) in forbidden


def test_court_for_slot():
    config = SeasonConfig.reference()

    assert config.court_for_slot(0).name == "Main A"
    assert config.court_for_slot(1).name == "Main A"
    assert config.court_for_slot(2).name == "Main B"
    assert config.court_for_slot(7).name == "Main D"
    with pytest.raises(IndexError):
        config.court_for_slot(8)


def test_unnamed_courts_get_numbered_names():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=2,
        court_groups=[CourtGroup((0, 1, 2, 3)), (4, 5, 6, 7)],
    )
    assert [g.name for g in config.court_groups] == ["Court 1", "Court 2"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_participants": 5},
        {"num_participants": 4, "num_weeks": 0},
        {"num_participants": 4, "court_groups": [CourtGroup((0, 1, 2))]},
        {"num_participants": 4, "court_groups": [CourtGroup((0, 1, 2, 4))]},
        {"num_participants": 4, "court_groups": []},
        {
            "num_participants": 8,
            "court_groups": [CourtGroup((0, 1, 2, 3)), CourtGroup((2, 3, 4, 5))],
        },
        {
            "num_participants": 4,
            "court_groups": [CourtGroup((0, 1, 2, 3)), CourtGroup((0, 1, 2, 3))],
            "allow_overlap": True,
        },
    ],
)
def test_invalid_configurations_raise(kwargs):
    kwargs.setdefault("num_weeks", 1)
    kwargs.setdefault("court_groups", [CourtGroup((0, 1))])
    with pytest.raises(InvalidConfigurationException):
        SeasonConfig(**kwargs)


def test_overlap_allowed_when_requested():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=1,
        court_groups=[CourtGroup((0, 1, 2, 3)), CourtGroup((2, 3, 4, 5))],
        allow_overlap=True,
    )
    assert config.matches_per_week == 4


def test_baseline_can_be_kept():
    config = SeasonConfig(exclude_baseline_pairs=False)
    assert config.forbidden_pairs() == frozenset()


def test_dict_round_trip():
    config = SeasonConfig(
        num_participants=8,
        num_weeks=3,
        court_groups=[CourtGroup((0, 2, 4, 6), name="East"), CourtGroup((1, 3, 5, 7))],
    )
    assert SeasonConfig.from_dict(config.to_dict()) == config


def test_from_dict_accepts_bare_member_lists():
    config = SeasonConfig.from_dict(
        {"num_participants": 4, "num_weeks": 2, "court_groups": [[0, 1, 2, 3]]}
    )
    assert config.court_groups[0].members == (0, 1, 2, 3)
    assert config.court_groups[0].name == "Court 1"


def test_default_court_groups():
    assert len(default_court_groups(16)) == 4
    assert [g.members for g in default_court_groups(8)] == [(0, 1, 2, 3), (4, 5, 6, 7)]
    assert len(default_court_groups(10)) == 2
    assert default_court_groups(2)[0].members == (0, 1)
