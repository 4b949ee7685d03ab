"""
Plain text rendering of schedules for the command line.
"""

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

from typing import Dict, List, Optional

from courtscheduler.constants import PARTICIPANT_PREFIX
from courtscheduler.models.schedule import Schedule
from courtscheduler.models.season_config import SeasonConfig
from courtscheduler.pairing.enumerator import PairingEnumerator
from courtscheduler.pairing.match_index import MatchIndex

EMPTY_CELL = "....."
BLOCKED_CELL = "  X  "
DIAGONAL_CELL = "  |  "


def format_duration(seconds: float) -> str:
    """Format a duration as ``HH:MM:SS.mmm``.

    Args:
        seconds: Elapsed time in seconds

    Returns:
        Zero padded duration string, e.g. ``"00:01:02.345"``
    """
    total_millis = int(round(max(seconds, 0.0) * 1000))
    hours, remainder = divmod(total_millis, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def participant_name(participant: int) -> str:
    return f"{PARTICIPANT_PREFIX}{participant + 1}"


def format_match(match_index: MatchIndex, match_id: int) -> str:
    """Compact ``T3-T7`` form of a match, smaller participant first."""
    high, low = match_index.id_to_pair(match_id)
    return f"{participant_name(low)}-{participant_name(high)}"


def format_schedule_table(
    schedule: Schedule,
    config: SeasonConfig,
    match_index: Optional[MatchIndex] = None,
) -> str:
    """Render the schedule with one row per week and one column per slot.

    Slot columns are headed by the court owning them, numbered when a
    court hosts more than one match.
    """
    match_index = match_index or MatchIndex(schedule.num_participants)

    headers = []
    for group in config.court_groups:
        for number in range(group.matches_per_week):
            if group.matches_per_week > 1:
                headers.append(f"{group.name} {number + 1}")
            else:
                headers.append(group.name)

    rows: List[List[str]] = []
    for week, match_ids in enumerate(schedule.weeks):
        cells = [format_match(match_index, m) for m in match_ids]
        cells += ["-----"] * (len(headers) - len(cells))
        rows.append([f"Week {week + 1}"] + cells)

    header_row = ["Week"] + headers
    widths = [len(h) for h in header_row]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(cell))
            else:
                widths.append(len(cell))

    def render(row: List[str]) -> str:
        padded = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
        return "  ".join(padded).rstrip()

    lines = [render(header_row), render(["-" * w for w in widths])]
    lines.extend(render(row) for row in rows)
    return "\n".join(lines)


def format_opponent_matrix(
    schedule: Schedule,
    config: Optional[SeasonConfig] = None,
    match_index: Optional[MatchIndex] = None,
) -> str:
    """Render the participant x participant matrix of meeting weeks.

    Each cell holds the week (1-based) in which the two participants met,
    ``X`` for a blocked baseline pair and dots for pairs that never met.
    """
    size = schedule.num_participants
    match_index = match_index or MatchIndex(size)
    met: Dict[tuple, int] = {}
    for week, match_ids in enumerate(schedule.weeks):
        for match_id in match_ids:
            high, low = match_index.id_to_pair(match_id)
            met[(low, high)] = week + 1
    forbidden = config.forbidden_pairs() if config is not None else frozenset()

    lines = ["     " + "".join(f"{participant_name(c):<5}" for c in range(size))]
    for row in range(size):
        cells = []
        for col in range(size):
            key = (min(row, col), max(row, col))
            if row == col:
                cells.append(DIAGONAL_CELL)
            elif key in met:
                cells.append(f"{met[key]:<5}")
            elif key in forbidden:
                cells.append(BLOCKED_CELL)
            else:
                cells.append(EMPTY_CELL)
        lines.append(f"{participant_name(row):<5}" + "".join(cells))
    return "\n".join(line.rstrip() for line in lines)


def format_pairings(enumerator: PairingEnumerator) -> str:
    """List every enumerated pairing of a court group with its index."""
    lines = [
        f"Group {', '.join(participant_name(p) for p in enumerator.elements)}: "
        f"{len(enumerator)} pairings ({enumerator.raw_count} before exclusions)"
    ]
    for index, pairing in enumerate(enumerator.pairings):
        pairs = ", ".join(
            f"{participant_name(a)}-{participant_name(b)}" for a, b in pairing
        )
        lines.append(f"{index:>4}: {pairs}")
    return "\n".join(lines)


def format_stats(stats: Dict[str, object]) -> str:
    """Render scheduler statistics as aligned ``name: value`` lines."""
    width = max((len(key) for key in stats), default=0)
    lines = []
    for key, value in stats.items():
        if key == "elapsed_seconds":
            value = format_duration(float(value))
        lines.append(f"{key.replace('_', ' ').capitalize():<{width}} : {value}")
    return "\n".join(lines)
