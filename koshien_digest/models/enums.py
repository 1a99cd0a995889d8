from enum import Enum


class FailureKind(str, Enum):
    TRANSPORT = "TRANSPORT"  # Unreachable, timeout, non-2xx status
    PARSE = "PARSE"  # Body is not valid JSON
    SHAPE = "SHAPE"  # Valid JSON, unexpected structure


class RunOutcome(str, Enum):
    NO_TEAMS = "NO_TEAMS"
    NO_GAMES = "NO_GAMES"
    POSTED = "POSTED"
    DRY_RUN = "DRY_RUN"
