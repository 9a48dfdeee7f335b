"""Game session: one independent Human vs Computer game.

The session is driven entirely by its caller. After a successful human move
the caller must invoke ``advance_computer_turn``; nothing here runs on a
timer. A session is not thread-safe: callers serialise access per session.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Optional

from game.domain.difficulty import Difficulty, DifficultyProfile, get_profile
from game.domain.entities import Actor, EntityKind, GamePhase, Movie, Player
from game.domain.results import (
    ChallengeResult,
    GameSnapshot,
    MoveOutcome,
    MoveResult,
    RoundEnd,
    RoundEndReason,
    RoundStartResult,
)
from game.errors import GameConfigurationError, IllegalTurnError, StoreUnavailableError
from game.resolver import EntityResolver, normalize_input
from game.round import RoundStateMachine
from game.selector import CandidateSelector
from game.store.base_store import KnowledgeStore
from game.validator import Validator

logger = logging.getLogger(__name__)

# Game event logger for play-by-play visibility
game_logger = logging.getLogger("game.events")


def _score_line(scores) -> str:
    return f"Score: You {scores[Player.HUMAN]} - Computer {scores[Player.COMPUTER]}"


class GameSession:
    def __init__(
        self,
        store: KnowledgeStore,
        rounds_to_win: int = 5,
        resolver_limit: int = 5,
        selector: Optional[CandidateSelector] = None,
        rng: Optional[random.Random] = None,
        session_id: Optional[str] = None,
    ):
        self._session_id = session_id or uuid.uuid4().hex
        self._rng = rng or random.Random()
        self._store = store
        self._resolver = EntityResolver(store, default_limit=resolver_limit)
        self._validator = Validator(store)
        self._selector = selector or CandidateSelector(store, rng=self._rng)
        self._machine = RoundStateMachine(rounds_to_win=rounds_to_win)
        self._profile: Optional[DifficultyProfile] = None
        self._last_move_message: Optional[str] = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def profile(self) -> Optional[DifficultyProfile]:
        return self._profile

    @property
    def phase(self) -> GamePhase:
        return self._machine.phase

    @property
    def resolver(self) -> EntityResolver:
        return self._resolver

    @property
    def validator(self) -> Validator:
        return self._validator

    @property
    def selector(self) -> CandidateSelector:
        return self._selector

    def start_game(self, profile: DifficultyProfile | Difficulty | str) -> RoundStartResult:
        if self._machine.phase != GamePhase.IDLE:
            raise IllegalTurnError(f"Cannot start game in state: {self._machine.phase.value}")

        if not isinstance(profile, DifficultyProfile):
            profile = get_profile(profile)

        result = self._open_round(profile)
        self._profile = profile
        game_logger.info(
            "[%s] Game started, difficulty=%s, rounds_to_win=%d",
            self._session_id,
            profile.name,
            self._machine.rounds_to_win,
        )
        return result

    def next_round(self) -> RoundStartResult:
        if self._machine.phase != GamePhase.ROUND_OVER:
            raise IllegalTurnError(f"Cannot start next round in state: {self._machine.phase.value}")
        assert self._profile is not None
        return self._open_round(self._profile)

    def _open_round(self, profile: DifficultyProfile) -> RoundStartResult:
        entity = self._pick_opening(profile)
        self._machine.start_round(entity)

        round_number = self._machine.round_number
        if isinstance(entity, Movie):
            message = (
                f"Round {round_number} begins! The starting movie is {entity.label}. "
                "Name an actor from this movie."
            )
            self._last_move_message = f"Computer starts with movie: {entity.label}"
        else:
            message = (
                f'Round {round_number} begins! The starting actor is "{entity.display_name}". '
                "Name a movie they were in."
            )
            self._last_move_message = f"Computer starts with actor: {entity.display_name}"

        game_logger.info("[%s] Round %d opened on %s", self._session_id, round_number, entity.id)
        return RoundStartResult(
            round_number=round_number,
            entity=entity,
            kind=EntityKind(entity.kind),
            first_player=Player.HUMAN,
            message=message,
        )

    def _pick_opening(self, profile: DifficultyProfile) -> Actor | Movie:
        kinds = [EntityKind.ACTOR, EntityKind.MOVIE]
        self._rng.shuffle(kinds)

        for kind in kinds:
            if kind == EntityKind.ACTOR:
                entity = self._store.random_actor(
                    min_connectivity=profile.min_relevance_for_round_start,
                    min_year=profile.min_year,
                    max_billing=profile.max_billing_order,
                    min_filmography_size=profile.min_filmography_size_for_round_start,
                )
            else:
                entity = self._store.random_movie(
                    min_connectivity=profile.min_relevance_for_round_start,
                    min_year=profile.min_year,
                )
            if entity is not None:
                return entity
            logger.warning("No starting %s satisfies the %s thresholds", kind.value, profile.name)

        raise GameConfigurationError(
            f"Could not find a suitable starting actor or movie for difficulty '{profile.name}'. "
            "The knowledge store may be too small or the thresholds misconfigured."
        )

    def submit_human_move(self, text: str) -> MoveResult:
        self._machine.require_turn(Player.HUMAN)

        query = normalize_input(text)
        current = self._machine.current_entity
        assert current is not None
        wanted = EntityKind(current.kind).other

        if not query:
            return MoveResult(
                player=Player.HUMAN,
                outcome=MoveOutcome.NOT_FOUND,
                query=query,
                message="Please enter a valid name.",
            )

        resolved = self._resolver.resolve(wanted, query)
        validation = self._validator.check(current, resolved, self._machine.round_state.used_ids)
        entity = validation.entity

        if validation.outcome == MoveOutcome.NOT_FOUND:
            message = f'Couldn\'t find any {wanted.value} matching "{query}". Try again.'
        elif validation.outcome == MoveOutcome.ALREADY_USED:
            message = f'"{entity.name}" has already been named this round. Try another {wanted.value}.'
        elif validation.outcome == MoveOutcome.NOT_CONNECTED:
            if isinstance(current, Movie):
                message = f'"{entity.name}" is not in "{current.title}". Try another actor.'
            else:
                message = f'"{current.display_name}" is not in "{entity.name}". Try another movie.'
        else:
            self._machine.record_move(Player.HUMAN, entity)
            self._last_move_message = f"You named: {entity.label}"
            game_logger.info("[%s] Human named %s (%s)", self._session_id, entity.id, entity.name)
            return MoveResult(
                player=Player.HUMAN,
                outcome=MoveOutcome.VALID,
                entity=entity,
                query=query,
                message=f"{entity.label} - correct! Computer's turn.",
            )

        game_logger.info(
            "[%s] Human answer %r rejected: %s", self._session_id, query, validation.outcome.value
        )
        return MoveResult(
            player=Player.HUMAN,
            outcome=validation.outcome,
            entity=entity,
            query=query,
            message=message,
        )

    def advance_computer_turn(self) -> MoveResult:
        self._machine.require_turn(Player.COMPUTER)
        assert self._profile is not None

        current = self._machine.current_entity
        assert current is not None
        pick = self._selector.pick_continuation(
            current, self._profile, self._machine.round_state.used_ids
        )

        if pick is None:
            round_end = self._machine.end_round(Player.HUMAN, RoundEndReason.GAVE_UP)
            message = self._round_end_message(
                "Computer couldn't find a valid answer!", round_end
            )
            self._last_move_message = message
            game_logger.info("[%s] Computer gives up on %s", self._session_id, current.id)
            return MoveResult(
                player=Player.COMPUTER,
                outcome=MoveOutcome.GAVE_UP,
                round_end=round_end,
                message=message,
            )

        entity = pick.entity
        self._machine.record_move(Player.COMPUTER, entity)
        self._last_move_message = f"Computer named: {entity.label}"
        game_logger.info("[%s] Computer named %s (%s)", self._session_id, entity.id, entity.name)

        if isinstance(entity, Movie):
            message = f"Computer says: {entity.label}. Your turn to name an actor from this movie."
        else:
            message = f'Computer says: "{entity.display_name}". Your turn to name a movie with this actor.'
        return MoveResult(
            player=Player.COMPUTER,
            outcome=MoveOutcome.VALID,
            entity=entity,
            message=message,
        )

    def issue_challenge(self) -> ChallengeResult:
        self._machine.begin_challenge()
        assert self._profile is not None

        current = self._machine.current_entity
        assert current is not None
        try:
            witness = self._selector.prove_continuation_exists(
                current, self._profile, self._machine.round_state.used_ids
            )
        except StoreUnavailableError:
            self._machine.cancel_challenge()
            raise

        if witness is not None:
            round_end = self._machine.end_round(
                Player.COMPUTER, RoundEndReason.CHALLENGE_REFUTED, proof=witness.entity
            )
            message = self._round_end_message(
                f'Challenge failed! Computer proves: "{witness.entity.name}"', round_end
            )
            game_logger.info(
                "[%s] Challenge refuted with %s", self._session_id, witness.entity.id
            )
        else:
            round_end = self._machine.end_round(Player.HUMAN, RoundEndReason.CHALLENGE_UPHELD)
            message = self._round_end_message(
                "Challenge successful! Computer had no valid answer.", round_end
            )
            game_logger.info("[%s] Challenge upheld on %s", self._session_id, current.id)

        self._last_move_message = message
        return ChallengeResult(
            round_winner=round_end.winner,
            proof=round_end.proof,
            round_end=round_end,
            message=message,
        )

    @staticmethod
    def _round_end_message(prefix: str, round_end: RoundEnd) -> str:
        scores = round_end.scores
        if round_end.game_winner is not None:
            who = "You win" if round_end.game_winner == Player.HUMAN else "Computer wins"
            return (
                f"{prefix} {who} the game "
                f"{scores[Player.HUMAN]}-{scores[Player.COMPUTER]}!"
            )
        return f"{prefix} {_score_line(scores)}"

    def get_state(self) -> GameSnapshot:
        round_state = self._machine.round_state
        session_state = self._machine.session_state
        return GameSnapshot(
            session_id=self._session_id,
            difficulty=self._profile.name if self._profile else None,
            phase=session_state.phase,
            round_number=session_state.round_number,
            rounds_to_win=self._machine.rounds_to_win,
            turn_owner=round_state.turn_owner,
            current_entity=round_state.current_entity,
            current_kind=round_state.current_kind,
            scores=dict(session_state.scores),
            winner=session_state.winner,
            used_actor_ids=sorted(round_state.used_actor_ids),
            used_movie_ids=sorted(round_state.used_movie_ids),
            last_move_message=self._last_move_message,
        )
