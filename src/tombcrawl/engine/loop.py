"""Turn scheduler.

One step of the game is one player action followed, if the action used
the turn, by one action from every AI-bearing entity in store order:

1. Offer a pending level-up to the level-up chooser.
2. Recompute visibility if the player moved since the last computation.
3. Read one intent and resolve it.
4. If the turn was used and the player is still alive, let every monster
   act once, in increasing index order.

The GameLoop owns no world data of its own beyond the cached visibility;
everything lives in the GameState it drives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from tombcrawl.core.config import GameSettings, get_settings
from tombcrawl.core.logging import bind_context, get_logger
from tombcrawl.engine.ai import player_move_or_attack, take_turn
from tombcrawl.engine.collaborators import (
    IntentKind,
    IntentSource,
    LevelUpChooser,
    PlayerIntent,
    TargetSelector,
    Visibility,
    VisibilityProvider,
)
from tombcrawl.engine.combat import can_level_up, character_info, level_up
from tombcrawl.engine.dice import DiceRoller
from tombcrawl.engine.inventory import drop_item, pick_item_up, use_item
from tombcrawl.engine.levels import next_level, on_stairs
from tombcrawl.models.enums import LevelUpChoice
from tombcrawl.models.game_state import GameState
from tombcrawl.storage.database import Database


logger = get_logger(__name__)


# =============================================================================
# Turn Status
# =============================================================================


class PlayerAction(StrEnum):
    """Whether the player's action let the monsters act."""

    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


class TurnStatus(StrEnum):
    """State of the game after a step."""

    PLAYING = "playing"
    PLAYER_DEAD = "player_dead"
    """The game goes on in a dead display state; only quitting is useful."""

    QUIT = "quit"


@dataclass
class TurnResult:
    """Result of one scheduler step.

    Attributes:
        status: State of the game after the step.
        action: How the player's intent resolved.
        intent: The intent that was resolved.
        level_up: Stat chosen at the start of the step, if any.
        monsters_acted: Number of AI turns resolved.
        info: Character sheet, filled for SHOW_INFO.
    """

    status: TurnStatus
    action: PlayerAction
    intent: PlayerIntent
    level_up: LevelUpChoice | None = None
    monsters_acted: int = 0
    info: dict[str, int] = field(default_factory=dict)


# =============================================================================
# Game Loop
# =============================================================================


class GameLoop:
    """Drives a GameState through player and monster turns.

    Attributes:
        state: The world being played.
    """

    def __init__(
        self,
        state: GameState,
        *,
        intents: IntentSource,
        visibility: VisibilityProvider,
        targeting: TargetSelector | None = None,
        level_up_chooser: LevelUpChooser | None = None,
        rng: DiceRoller | None = None,
        settings: GameSettings | None = None,
        database: Database | None = None,
        save_slot: str | None = None,
    ) -> None:
        """Initialize the game loop.

        Args:
            state: The world to drive.
            intents: Source of player commands.
            visibility: Field-of-view collaborator.
            targeting: Tile picker for targeted items.
            level_up_chooser: Stat picker; level-ups wait until one is set.
            rng: Random source; a fresh one seeded from settings by default.
            settings: Game settings; defaults to the app settings.
            database: Save store; when set, quitting autosaves.
            save_slot: Slot used for the autosave.
        """
        self.state = state
        self._settings = settings or get_settings().game
        self._intents = intents
        self._visibility = visibility
        self._targeting = targeting
        self._level_up_chooser = level_up_chooser
        self._rng = rng or DiceRoller(seed=self._settings.seed)
        self._database = database
        self._save_slot = save_slot

        self._visible: Visibility | None = None
        self._visible_from: tuple[int, int] | None = None

        logger.info(
            "GameLoop initialized",
            dungeon_level=state.dungeon_level,
            entities=len(state.entities),
        )

    @property
    def visible(self) -> Visibility:
        """The current visibility predicate, computing it if needed."""
        return self._refresh_visibility()

    def _refresh_visibility(self) -> Visibility:
        """Recompute visibility if the player moved since the last time.

        Every newly visible tile is marked explored.
        """
        player = self.state.player
        if self._visible is not None and self._visible_from == player.pos:
            return self._visible

        radius = self._settings.torch_radius
        visible = self._visibility.compute(self.state.game_map, player.x, player.y, radius)
        game_map = self.state.game_map
        for x in range(max(0, player.x - radius), min(game_map.width, player.x + radius + 1)):
            for y in range(max(0, player.y - radius), min(game_map.height, player.y + radius + 1)):
                if visible(x, y):
                    game_map.mark_explored(x, y)

        self._visible = visible
        self._visible_from = player.pos
        return visible

    def _invalidate_visibility(self) -> None:
        self._visible = None
        self._visible_from = None

    def _offer_level_up(self) -> LevelUpChoice | None:
        if self._level_up_chooser is None or not can_level_up(self.state):
            return None
        choice = LevelUpChoice(self._level_up_chooser.choose(self.state))
        level_up(self.state, choice)
        return choice

    def _resolve_intent(
        self,
        intent: PlayerIntent,
        visible: Visibility,
        result: TurnResult,
    ) -> PlayerAction:
        """Apply one player intent to the world."""
        state = self.state
        if intent.kind == IntentKind.QUIT:
            return PlayerAction.EXIT
        if not state.player.alive:
            return PlayerAction.DIDNT_TAKE_TURN

        acted = False
        if intent.kind == IntentKind.MOVE:
            acted = player_move_or_attack(intent.dx, intent.dy, state).succeeded
        elif intent.kind == IntentKind.WAIT:
            acted = True
        elif intent.kind == IntentKind.PICK_UP:
            items = state.entities.items_at(*state.player.pos)
            if items:
                acted = pick_item_up(items[0], state).succeeded
        elif intent.kind == IntentKind.DROP:
            acted = drop_item(intent.inventory_index or 0, state).succeeded
        elif intent.kind == IntentKind.USE_ITEM:
            outcome = use_item(intent.inventory_index or 0, state, visible, self._targeting)
            acted = outcome.took_effect
        elif intent.kind == IntentKind.DESCEND:
            if on_stairs(state):
                next_level(state, self._rng, self._settings)
                self._invalidate_visibility()
                bind_context(dungeon_level=state.dungeon_level)
                acted = True
            else:
                state.log("There are no stairs here.")
        elif intent.kind == IntentKind.SHOW_INFO:
            result.info = character_info(state)

        if acted and intent.consumes_turn:
            return PlayerAction.TOOK_TURN
        return PlayerAction.DIDNT_TAKE_TURN

    def _run_monsters(self, visible: Visibility) -> int:
        acted = 0
        for index in range(len(self.state.entities)):
            if self.state.entities[index].ai is not None:
                take_turn(index, self.state, visible, self._rng)
                acted += 1
        return acted

    def _status(self, action: PlayerAction) -> TurnStatus:
        if action == PlayerAction.EXIT:
            return TurnStatus.QUIT
        if not self.state.player.alive:
            return TurnStatus.PLAYER_DEAD
        return TurnStatus.PLAYING

    def step(self) -> TurnResult:
        """Run one player action and, if it used the turn, one monster round.

        Returns:
            What happened during the step.
        """
        chosen = self._offer_level_up()
        visible = self._refresh_visibility()
        intent = self._intents.next_intent(self.state)

        result = TurnResult(
            status=TurnStatus.PLAYING,
            action=PlayerAction.DIDNT_TAKE_TURN,
            intent=intent,
            level_up=chosen,
        )
        result.action = self._resolve_intent(intent, visible, result)

        if result.action == PlayerAction.TOOK_TURN and self.state.player.alive:
            if self._visible is None:
                # the map was replaced by a descent
                visible = self._refresh_visibility()
            result.monsters_acted = self._run_monsters(visible)

        result.status = self._status(result.action)
        logger.debug(
            "Step resolved",
            intent=str(intent.kind),
            action=str(result.action),
            monsters_acted=result.monsters_acted,
        )
        return result

    def run(self, max_steps: int | None = None) -> TurnResult | None:
        """Step until the player quits.

        Args:
            max_steps: Stop after this many steps even without a quit.

        Returns:
            The last step's result, or None if no step ran.
        """
        bind_context(dungeon_level=self.state.dungeon_level)
        last: TurnResult | None = None
        steps = 0
        while max_steps is None or steps < max_steps:
            last = self.step()
            steps += 1
            if last.status == TurnStatus.QUIT:
                if self._database is not None:
                    self._database.save_game(self.state, self._save_slot)
                break

        logger.info("Game loop stopped", steps=steps, dungeon_level=self.state.dungeon_level)
        return last


__all__ = [
    "PlayerAction",
    "TurnStatus",
    "TurnResult",
    "GameLoop",
]
