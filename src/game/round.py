"""Round and turn state machine.

    IDLE -> PLAYING -> CHALLENGE_PENDING -> ROUND_OVER | GAME_OVER
                    -> ROUND_OVER | GAME_OVER
    ROUND_OVER -> PLAYING (next round)

GAME_OVER is terminal; a new game needs a new session.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from game.domain.entities import (
    Actor,
    EntityKind,
    GamePhase,
    Movie,
    Player,
    RoundState,
    SessionState,
)
from game.domain.results import RoundEnd, RoundEndReason
from game.errors import IllegalTurnError

logger = logging.getLogger(__name__)


class RoundStateMachine:
    def __init__(self, rounds_to_win: int = 5):
        if rounds_to_win < 1:
            raise ValueError("rounds_to_win must be at least 1")
        self._rounds_to_win = rounds_to_win
        self._round = RoundState()
        self._session = SessionState()

    @property
    def rounds_to_win(self) -> int:
        return self._rounds_to_win

    @property
    def round_state(self) -> RoundState:
        return self._round

    @property
    def session_state(self) -> SessionState:
        return self._session

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    @property
    def round_number(self) -> int:
        return self._session.round_number

    @property
    def scores(self) -> Dict[Player, int]:
        return dict(self._session.scores)

    @property
    def current_entity(self) -> Optional[Actor | Movie]:
        return self._round.current_entity

    @property
    def turn_owner(self) -> Optional[Player]:
        return self._round.turn_owner

    def _require_phase(self, *phases: GamePhase, action: str) -> None:
        if self._session.phase not in phases:
            raise IllegalTurnError(f"Cannot {action} in state: {self._session.phase.value}")

    def next_round_number(self) -> int:
        """Number the next started round will carry."""
        if self._session.phase == GamePhase.IDLE:
            return 1
        return self._session.round_number + 1

    def start_round(self, entity: Actor | Movie) -> None:
        """Open a round on ``entity``; the human answers first."""
        self._require_phase(GamePhase.IDLE, GamePhase.ROUND_OVER, action="start a round")

        self._session.round_number = self.next_round_number()
        self._round.reset()
        self._round.current_entity = entity
        self._round.current_kind = EntityKind(entity.kind)
        self._round.mark_used(entity)
        self._round.turn_owner = Player.HUMAN
        self._session.phase = GamePhase.PLAYING

        logger.debug("Round %d opened on %s", self._session.round_number, entity.id)

    def require_turn(self, player: Player) -> None:
        self._require_phase(GamePhase.PLAYING, action="move")
        if self._round.turn_owner != player:
            raise IllegalTurnError(f"It is not the {player.value} player's turn")

    def is_used(self, entity_id: str) -> bool:
        return self._round.is_used(entity_id)

    def record_move(self, player: Player, entity: Actor | Movie) -> None:
        self.require_turn(player)

        current_kind = self._round.current_kind
        if current_kind is None or EntityKind(entity.kind) != current_kind.other:
            raise IllegalTurnError(
                f"Expected a {current_kind.other.value if current_kind else 'starting'} entity, "
                f"got {entity.kind}"
            )
        if self._round.is_used(entity.id):
            raise IllegalTurnError(f"Entity already used this round: {entity.id}")

        self._round.mark_used(entity)
        self._round.current_entity = entity
        self._round.current_kind = EntityKind(entity.kind)
        self._round.turn_owner = player.opponent

    def begin_challenge(self) -> None:
        self._require_phase(GamePhase.PLAYING, action="challenge")
        if self._round.turn_owner != Player.HUMAN:
            raise IllegalTurnError("You can only challenge when it's your turn")
        self._session.phase = GamePhase.CHALLENGE_PENDING

    def cancel_challenge(self) -> None:
        """Return to play when a challenge could not be adjudicated."""
        self._require_phase(GamePhase.CHALLENGE_PENDING, action="cancel a challenge")
        self._session.phase = GamePhase.PLAYING

    def end_round(
        self,
        winner: Player,
        reason: RoundEndReason,
        proof: Optional[Actor | Movie] = None,
    ) -> RoundEnd:
        self._require_phase(GamePhase.PLAYING, GamePhase.CHALLENGE_PENDING, action="end a round")

        self._session.scores[winner] += 1
        self._round.turn_owner = None

        game_winner = None
        if self._session.scores[winner] >= self._rounds_to_win:
            game_winner = winner
            self._session.phase = GamePhase.GAME_OVER
            self._session.winner = winner
            logger.info("Game over, winner: %s", winner.value)
        else:
            self._session.phase = GamePhase.ROUND_OVER

        return RoundEnd(
            round_number=self._session.round_number,
            winner=winner,
            reason=reason,
            scores=self.scores,
            proof=proof,
            game_winner=game_winner,
        )
