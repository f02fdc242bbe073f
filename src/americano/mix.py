"""Mix Americano schedules.

Every team is one man and one woman. Schedules are fixed matrices over slots
M1..Mn / W1..Wn; players are mapped onto slots at random, or around a pinned
first match.
"""

import random
from typing import Dict, List, Optional, Sequence, Tuple

from tournament.models import Round, build_round

# (home man, home woman, away man, away woman)
SCHEDULE_6_PLAYERS = [
    ("M1", "W1", "M2", "W2"),
    ("M1", "W2", "M3", "W3"),
    ("M2", "W3", "M3", "W2"),
    ("M1", "W3", "M2", "W1"),
    ("M1", "W1", "M3", "W2"),
    ("M2", "W1", "M3", "W3"),
    ("M1", "W2", "M2", "W3"),
    ("M2", "W2", "M3", "W1"),
    ("M1", "W3", "M3", "W1"),
]

SCHEDULE_8_PLAYERS = [
    ("M1", "W1", "M2", "W2"),
    ("M3", "W3", "M4", "W4"),
    ("M1", "W3", "M3", "W1"),
    ("M2", "W2", "M4", "W4"),
    ("M1", "W4", "M4", "W1"),
    ("M2", "W3", "M3", "W2"),

    ("M1", "W2", "M2", "W1"),
    ("M3", "W4", "M4", "W3"),
    ("M2", "W4", "M4", "W2"),
    ("M1", "W1", "M3", "W3"),
    ("M1", "W1", "M4", "W4"),
    ("M2", "W3", "M3", "W2"),

    ("M1", "W3", "M2", "W4"),
    ("M3", "W1", "M4", "W2"),
    ("M2", "W1", "M4", "W3"),
    ("M1", "W2", "M3", "W4"),
    ("M1", "W4", "M2", "W3"),
    ("M3", "W2", "M4", "W1"),

    ("M2", "W2", "M3", "W3"),
    ("M1", "W4", "M4", "W1"),
    ("M1", "W2", "M4", "W3"),
    ("M2", "W1", "M3", "W4"),
    ("M1", "W3", "M4", "W2"),
    ("M2", "W4", "M3", "W1"),
]

SCHEDULES = {6: SCHEDULE_6_PLAYERS, 8: SCHEDULE_8_PLAYERS}

# 8 players already play a complete cycle
EXTENDED_ROUNDS = {6: len(SCHEDULE_6_PLAYERS)}


def split_by_gender(players: List[str], genders: Dict[str, str]) -> Tuple[List[str], List[str]]:
    men = [p for p in players if genders.get(p) == "male"]
    women = [p for p in players if genders.get(p) == "female"]
    return men, women


def _slot_map(men: List[str], women: List[str]) -> Dict[str, str]:
    slots = {f"M{i + 1}": name for i, name in enumerate(men)}
    slots.update({f"W{i + 1}": name for i, name in enumerate(women)})
    return slots


def _pinned_slot_map(
    men: List[str],
    women: List[str],
    genders: Dict[str, str],
    first_match: Tuple[Sequence[str], Sequence[str]],
    schedule: list,
    rng: random.Random,
) -> Dict[str, str]:
    team_a, team_b = first_match
    a_man = next(p for p in team_a if genders[p] == "male")
    a_woman = next(p for p in team_a if genders[p] == "female")
    b_man = next(p for p in team_b if genders[p] == "male")
    b_woman = next(p for p in team_b if genders[p] == "female")

    home_m, home_w, away_m, away_w = schedule[0]
    slots = {home_m: a_man, home_w: a_woman, away_m: b_man, away_w: b_woman}

    rest_men = [p for p in men if p not in (a_man, b_man)]
    rest_women = [p for p in women if p not in (a_woman, b_woman)]
    rng.shuffle(rest_men)
    rng.shuffle(rest_women)
    free_men = [f"M{i + 1}" for i in range(len(men)) if f"M{i + 1}" not in slots]
    free_women = [f"W{i + 1}" for i in range(len(women)) if f"W{i + 1}" not in slots]
    slots.update(zip(free_men, rest_men))
    slots.update(zip(free_women, rest_women))
    return slots


def generate_mix_rounds(
    players: List[str],
    genders: Dict[str, str],
    first_match: Optional[Tuple[Sequence[str], Sequence[str]]] = None,
    rng: Optional[random.Random] = None,
    start: int = 1,
) -> List[Round]:
    rng = rng or random.Random()
    schedule = SCHEDULES[len(players)]
    men, women = split_by_gender(players, genders)

    if first_match is not None:
        slots = _pinned_slot_map(men, women, genders, first_match, schedule, rng)
    else:
        men, women = list(men), list(women)
        rng.shuffle(men)
        rng.shuffle(women)
        slots = _slot_map(men, women)

    rounds = []
    for offset, (home_m, home_w, away_m, away_w) in enumerate(schedule):
        rounds.append(build_round(
            start + offset,
            players,
            [slots[home_m], slots[home_w]],
            [slots[away_m], slots[away_w]],
        ))
    return rounds
