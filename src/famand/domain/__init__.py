"""Famand rule engine.

The engine is a set of pure rule functions operating on an in-memory
:class:`~famand.domain.models.GameState`:

* Dataclasses describing every game entity (see :mod:`models`).
* Enumerations and strongly typed identifiers used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* The card catalog, grid helpers, combo engine and production resolver.
* The turn phase machine, events, victory/defeat evaluation and the intent
  dispatcher that hosts drive the game through (see :mod:`intents`).

Nothing here performs I/O; persistence and transport live in
:mod:`famand.repository` and :mod:`famand.api`.
"""

from . import (
    achievements,
    catalog,
    combos,
    enums,
    errors,
    events,
    grid,
    intents,
    models,
    phases,
    production,
    resources,
    rules_config,
    selection,
    setup,
    victory,
)

__all__ = [
    "achievements",
    "catalog",
    "combos",
    "enums",
    "errors",
    "events",
    "grid",
    "intents",
    "models",
    "phases",
    "production",
    "resources",
    "rules_config",
    "selection",
    "setup",
    "victory",
]
