"""Round progression and scoring for one play-through.

GameController owns a GameState and is its only writer. The page and the
map read the state and call the operations below; every operation that is
not valid in the current state is ignored rather than raising.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from frontend.config import KM_PER_POINT, MAX_ROUND_SCORE
from frontend.geo import Coordinate, haversine_km
from frontend.rounds import ImageSlot, RoundDefinition

logger = logging.getLogger(__name__)


def round_score(distance_km: float) -> float:
    # Linear decay: full marks at zero distance, nothing from 10,000 km on
    return max(0.0, MAX_ROUND_SCORE - distance_km / KM_PER_POINT)


@dataclass(frozen=True)
class RoundResult:
    round_index: int
    guess: Coordinate
    distance_km: float
    score: float


@dataclass
class GameState:
    current_round_index: int = 1
    cumulative_score: float = 0.0
    pending_guess: Optional[Coordinate] = None
    revealed_distance_km: Optional[float] = None
    is_game_over: bool = False
    image_failure_flags: Set[Tuple[int, ImageSlot]] = field(default_factory=set)
    results: List[RoundResult] = field(default_factory=list)


class GameController:
    def __init__(self, rounds: Sequence[RoundDefinition]):
        if not rounds:
            raise ValueError("A game needs at least one round")
        self.rounds = tuple(rounds)
        self.state = GameState()

    # --------------------
    # Read helpers
    # --------------------
    @property
    def round_count(self) -> int:
        return len(self.rounds)

    @property
    def current_round(self) -> RoundDefinition:
        return self.rounds[self.state.current_round_index - 1]

    @property
    def is_showing_result(self) -> bool:
        return self.state.revealed_distance_km is not None

    @property
    def is_last_round(self) -> bool:
        return self.state.current_round_index == self.round_count

    @property
    def last_result(self) -> Optional[RoundResult]:
        return self.state.results[-1] if self.state.results else None

    @property
    def actual_location(self) -> Optional[Coordinate]:
        """The round's answer, withheld until its result is revealed."""
        if not self.is_showing_result:
            return None
        return self.current_round.reference_location

    def image_failed(self, which: ImageSlot) -> bool:
        return (self.state.current_round_index, which) in self.state.image_failure_flags

    # --------------------
    # Operations
    # --------------------
    def select_location(self, coordinate: Coordinate) -> bool:
        if self.state.is_game_over or self.is_showing_result:
            logger.debug("Ignoring location %s: result already shown", coordinate)
            return False
        self.state.pending_guess = coordinate
        return True

    def confirm_guess(self) -> Optional[RoundResult]:
        state = self.state
        if state.is_game_over or self.is_showing_result or state.pending_guess is None:
            logger.debug("Ignoring confirm: no pending guess for round %d", state.current_round_index)
            return None

        distance = haversine_km(state.pending_guess, self.current_round.reference_location)
        result = RoundResult(
            round_index=state.current_round_index,
            guess=state.pending_guess,
            distance_km=distance,
            score=round_score(distance),
        )
        state.cumulative_score += result.score
        state.revealed_distance_km = distance
        state.results.append(result)
        logger.info(
            "Round %d (%s): %.1f km, %.1f points, total %.1f",
            result.round_index, self.current_round.name, distance, result.score, state.cumulative_score,
        )
        return result

    def advance_round(self) -> None:
        state = self.state
        if state.is_game_over or not self.is_showing_result:
            logger.debug("Ignoring advance: no result shown for round %d", state.current_round_index)
            return

        if self.is_last_round:
            state.is_game_over = True
            logger.info("Game over after %d rounds, final score %.1f", self.round_count, state.cumulative_score)
            return

        state.current_round_index += 1
        state.pending_guess = None
        state.revealed_distance_km = None
        state.image_failure_flags.clear()
        logger.info("Starting round %d/%d", state.current_round_index, self.round_count)

    def report_image_failure(self, round_index: int, which: ImageSlot) -> None:
        if round_index != self.state.current_round_index:
            return
        if (round_index, which) not in self.state.image_failure_flags:
            logger.warning("Round %d %s image failed to load, showing placeholder", round_index, which.value)
            self.state.image_failure_flags.add((round_index, which))

    def restart(self) -> None:
        self.state = GameState()
        logger.info("Game restarted")
