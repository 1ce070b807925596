"""
WCA result arithmetic for challenge rooms.

All values are integer milliseconds. Inside this module a DNF is ``math.inf``;
``DNF_TIME`` is only the form a DNF takes in the database, so that a DNF sorts
after every finite result there too.

Rules (WCA regulations 9f1/9f2 as applied to room averages):
- singles are truncated to centiseconds,
- an average drops one best and one worst attempt, the mean of the rest is
  rounded to centiseconds,
- two or more DNFs make the average DNF.
"""
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from models.room_solve import Penalty

# Largest integer that survives a round trip through a double; DNF marker in storage
DNF_TIME = 2 ** 53 - 1

PLUS_TWO_MS = 2000

# Longest accepted raw time (one day); keeps every finished solve far below DNF_TIME
MAX_SOLVE_TIME = 24 * 60 * 60 * 1000

Number = Union[int, float]


def compute_final_time(time_ms: int, penalty: Penalty) -> int:
    """Raw time with the penalty applied, in storage form"""
    if penalty == Penalty.DNF:
        return DNF_TIME
    if penalty == Penalty.PLUS_TWO:
        return time_ms + PLUS_TWO_MS
    return time_ms


def truncate_to_centis(ms: Number) -> int:
    return int(math.floor(ms / 10)) * 10


def round_to_centis(ms: Number) -> int:
    # Half up, never to even
    return int(math.floor(ms / 10 + 0.5)) * 10


def is_dnf(value: Optional[Number]) -> bool:
    return value is not None and (value == math.inf or value >= DNF_TIME)


def to_wca_times(solves: Iterable) -> List[Number]:
    """
    Map solve records (anything with ``penalty`` and ``final_time``) to WCA
    values: truncated milliseconds, or inf for a DNF.
    """
    times = []
    for solve in solves:
        if solve.penalty == Penalty.DNF:
            times.append(math.inf)
        else:
            times.append(truncate_to_centis(solve.final_time))
    return times


def best_single(times: Sequence[Number]) -> Optional[int]:
    valid = [t for t in times if math.isfinite(t)]
    return min(valid) if valid else None


def wca_average(times: Sequence[Number]) -> Optional[Number]:
    """
    Trimmed mean of ``times`` (ao5 / ao12).

    Returns inf when the average is DNF and None when there are too few
    attempts to trim.
    """
    if len(times) < 3:
        return None

    dnf_count = sum(1 for t in times if not math.isfinite(t))
    if dnf_count >= 2:
        return math.inf

    ordered = sorted(times)
    middle = ordered[1:-1]
    return round_to_centis(sum(middle) / len(middle))


def best_rolling_average(times: Sequence[Number], size: int) -> Optional[Number]:
    """
    Best ``size``-solve average over every run of consecutive attempts.

    None when there are fewer than ``size`` attempts, inf when every window is
    DNF.
    """
    if len(times) < size:
        return None
    return min(wca_average(times[i:i + size]) for i in range(len(times) - size + 1))


def to_storage(value: Optional[Number]) -> Optional[int]:
    """inf -> DNF_TIME, everything else unchanged"""
    if value is None:
        return None
    if not math.isfinite(value):
        return DNF_TIME
    return int(value)


def average_sort_key(average: Optional[int]) -> Tuple[bool, int]:
    """Present averages first, ascending; a DNF average sorts after every finite one"""
    return (average is None, average if average is not None else 0)


def format_time(ms: Optional[Number]) -> Optional[str]:
    """Display form used by the leaderboards: ``m:ss.cc``, ``ss.cc`` or ``DNF``"""
    if ms is None:
        return None
    if is_dnf(ms):
        return "DNF"

    total_seconds = ms / 1000
    minutes = int(total_seconds // 60)
    seconds = total_seconds - minutes * 60

    if minutes > 0:
        return f"{minutes}:{seconds:05.2f}"
    return f"{seconds:.2f}"
