"""Short words describing speeds and turn rankings."""

SPEED_LABELS: dict[int, str] = {
    -2: "crawling",
    -1: "edging",
    0: "cruising",
    1: "speeding",
    2: "racing",
    3: "tempting death",
}
UNKNOWN_SPEED_LABEL = "freaking out"

TURN_LABELS: dict[int, str] = {
    1: "straight",
    2: "slight",
    3: "smooth",
    4: "sharp",
    5: "banked",
    6: "U",
}
UNKNOWN_TURN_LABEL = "impossible"


def speed_label(speed: int) -> str:
    return SPEED_LABELS.get(speed, UNKNOWN_SPEED_LABEL)


def turn_label(ranking: int) -> str:
    return TURN_LABELS.get(ranking, UNKNOWN_TURN_LABEL)
