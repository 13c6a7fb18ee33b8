"""Construction of a fresh game."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from famand.utils.rng import generate_seed, shuffle

from .catalog import DEFAULT_CATALOG, CardCatalog
from .enums import GamePhase, GridKind
from .grid import create_grid
from .models import Card, GameID, GameState, PlayerStats
from .resources import resources_from_map
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


def _deal(game_id: GameID, context: str, pool: Sequence[Card], count: int) -> list[Card]:
    """Shuffle ``pool`` (repeated as needed) and take ``count`` cards."""

    if not pool or count <= 0:
        return []
    copies = -(-count // len(pool))
    seed = generate_seed(game_id, 0, "setup", context)
    return shuffle(seed, list(pool) * copies)["items"][:count]


def new_game(
    game_id: GameID,
    catalog: CardCatalog = DEFAULT_CATALOG,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    deck: Sequence[Card] | None = None,
) -> GameState:
    """Create the opening position for ``game_id``.

    The deck and starting hand are dealt from seeded shuffles, so the same id
    and catalog always produce the same game.  A host-supplied ``deck`` is
    used in the given order.
    """

    setup = rules.setup
    hand = _deal(game_id, "starting_hand", catalog.starter_pool(), setup.starting_hand_size)
    cards = list(deck) if deck is not None else _deal(game_id, "deck", catalog.draw_pool(), setup.deck_size)

    state = GameState(
        game_id=game_id,
        resources=resources_from_map(setup.starting_resources),
        farm_grid=create_grid(GridKind.FARM, setup.grid_rows, setup.grid_cols),
        city_grid=create_grid(GridKind.CITY, setup.grid_rows, setup.grid_cols),
        hand=hand,
        deck=cards,
        landmarks_available=catalog.landmarks(),
        turn=1,
        phase=GamePhase.DRAW,
        player_stats=PlayerStats(reputation=setup.starting_reputation),
        extra_cards_per_turn=rules.turn.cards_per_draw,
        pending_draws=rules.turn.cards_per_draw,
        dice_rolls_allowed=rules.turn.dice_rolls_per_turn,
        dice_roll_required=rules.turn.require_dice_roll,
        can_play_actions=not rules.turn.require_dice_roll,
    )
    logger.info("game %s created: %d cards in hand, %d in deck", game_id, len(hand), len(cards))
    return state
