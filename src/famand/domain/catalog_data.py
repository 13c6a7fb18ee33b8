"""Built-in Famand card set.

Card text is kept in Portuguese to match the printed cards; the mechanics
are expressed through :class:`~famand.domain.models.CardEffect` fields.
"""

from __future__ import annotations

from .enums import CardType, CrisisEffect, Rarity, ResourceKind, StateFlag, Trigger
from .models import (
    AdjacencyMultiplier,
    Card,
    CardEffect,
    CardID,
    CardTarget,
    ChainBonus,
    CountScaling,
    DiversityBonus,
    GlobalMultiplier,
    ResourceMap,
)

COINS = ResourceKind.COINS
FOOD = ResourceKind.FOOD
MATERIALS = ResourceKind.MATERIALS
POPULATION = ResourceKind.POPULATION


def _amounts(coins: int = 0, food: int = 0, materials: int = 0, population: int = 0) -> ResourceMap:
    values = {COINS: coins, FOOD: food, MATERIALS: materials, POPULATION: population}
    return {kind: amount for kind, amount in values.items() if amount}


def _card(card_id: str, name: str, card_type: CardType, cost: ResourceMap, rarity: Rarity, effect: CardEffect) -> Card:
    return Card(id=CardID(card_id), name=name, type=card_type, cost=cost, effect=effect, rarity=rarity)


def _dice(description: str, numbers: tuple[int, ...], production: ResourceMap, **extra) -> CardEffect:
    return CardEffect(
        description=description,
        production=production,
        trigger=Trigger.DICE,
        dice_numbers=frozenset(numbers),
        **extra,
    )


def _turn(description: str, production: ResourceMap, **extra) -> CardEffect:
    return CardEffect(description=description, production=production, trigger=Trigger.TURN, **extra)


def _instant(description: str, production: ResourceMap | None = None, **extra) -> CardEffect:
    return CardEffect(description=description, production=production or {}, trigger=Trigger.INSTANT, **extra)


def _crisis(description: str, effect: CrisisEffect, duration: int) -> CardEffect:
    return CardEffect(description=description, trigger=Trigger.CRISIS, crisis_effect=effect, duration=duration)


FARM_CARDS: tuple[Card, ...] = (
    _card(
        "starter-garden", "Pequeno Jardim", CardType.FARM, {}, Rarity.STARTER,
        _turn("Produz 1 comida por turno.", _amounts(food=1)),
    ),
    _card(
        "starter-farm", "Fazenda Simples", CardType.FARM, {}, Rarity.STARTER,
        _dice("Produz 1 comida quando ativada por dado 1 ou 2.", (1, 2), _amounts(food=1)),
    ),
    _card(
        "farm-wheat", "Campo de Trigo", CardType.FARM, _amounts(coins=1), Rarity.COMMON,
        _dice("Produz 1 comida quando ativado por dado 1.", (1,), _amounts(food=1)),
    ),
    _card(
        "farm-cattle", "Rancho de Gado", CardType.FARM, _amounts(coins=3), Rarity.COMMON,
        _dice("Produz 2 comida quando ativado por dado 2.", (2,), _amounts(food=2)),
    ),
    _card(
        "farm-ricefield", "Campo de Arroz", CardType.FARM, _amounts(coins=2), Rarity.COMMON,
        _dice("Produz 1 comida quando ativado por dado 1 ou 2.", (1, 2), _amounts(food=1)),
    ),
    _card(
        "farm-mushroom", "Cultivo de Cogumelos", CardType.FARM, _amounts(coins=2, food=1), Rarity.COMMON,
        _dice("Produz 2 comidas quando ativado por dado 4.", (4,), _amounts(food=2)),
    ),
    _card(
        "farm-beehive", "Colmeia", CardType.FARM, _amounts(coins=3, food=1, materials=1), Rarity.UNCOMMON,
        _dice("Produz 1 comida e 1 moeda quando ativado por dado 3.", (3,), _amounts(coins=1, food=1)),
    ),
    _card(
        "farm-orchard", "Pomar Exótico", CardType.FARM, _amounts(coins=4, food=1, materials=2), Rarity.RARE,
        _dice("Produz 3 comida quando ativado por dado 5.", (5,), _amounts(food=3)),
    ),
    _card(
        "farm-vineyard", "Vinhedo", CardType.FARM, _amounts(coins=4), Rarity.RARE,
        _dice(
            "Produz 3 moedas quando ativado por dado 6. +1 moeda por vinhedo adjacente.",
            (6,),
            _amounts(coins=3),
            combo=ChainBonus(resource=COINS, amount=1),
        ),
    ),
    _card(
        "farm-barn", "Celeiro", CardType.FARM, _amounts(coins=3, materials=2), Rarity.UNCOMMON,
        CardEffect(
            description="Dobra a comida produzida pelas fazendas adjacentes.",
            trigger=Trigger.COMBO,
            combo=AdjacencyMultiplier(target=CardTarget(card_type=CardType.FARM), factor=2, resource=FOOD),
        ),
    ),
    _card(
        "farm-harvest-festival", "Festa da Colheita", CardType.FARM, _amounts(coins=1, food=1), Rarity.BOOSTER,
        _turn(
            "Produz 1 comida extra para cada fazenda que você controla.",
            {},
            combo=CountScaling(resource=FOOD, amount=1, per_card=CardTarget(card_type=CardType.FARM)),
        ),
    ),
)

CITY_CARDS: tuple[Card, ...] = (
    _card(
        "starter-tent", "Barraca", CardType.CITY, {}, Rarity.STARTER,
        _instant("Fornece 1 população imediatamente.", _amounts(population=1)),
    ),
    _card(
        "starter-workshop", "Oficina Simples", CardType.CITY, {}, Rarity.STARTER,
        _turn("Produz 1 material por turno.", _amounts(materials=1)),
    ),
    _card(
        "city-house", "Casa", CardType.CITY, _amounts(coins=2, materials=1), Rarity.COMMON,
        _instant("Fornece 1 população imediatamente.", _amounts(population=1)),
    ),
    _card(
        "city-market", "Mercado", CardType.CITY, _amounts(coins=4, materials=2), Rarity.UNCOMMON,
        _turn(
            "Produz 1 moeda por população por turno (máximo 5).",
            {},
            combo=CountScaling(resource=COINS, amount=1, per_resource=POPULATION, cap=5),
        ),
    ),
    _card(
        "city-bank", "Banco", CardType.CITY, _amounts(coins=5, materials=2), Rarity.RARE,
        _dice(
            "Produz 1 moeda por construção de cidade quando ativado por dado 5.",
            (5,),
            {},
            combo=CountScaling(resource=COINS, amount=1, per_card=CardTarget(card_type=CardType.CITY)),
        ),
    ),
    _card(
        "city-shopping", "Shopping Center", CardType.CITY, _amounts(coins=6, materials=3), Rarity.RARE,
        CardEffect(
            description="Dobra a produção dos mercados adjacentes.",
            trigger=Trigger.COMBO,
            combo=AdjacencyMultiplier(target=CardTarget(card_id=CardID("city-market")), factor=2),
        ),
    ),
    _card(
        "city-guild", "Guilda dos Artesãos", CardType.CITY, _amounts(coins=4, materials=3), Rarity.UNCOMMON,
        _turn(
            "Produz 1 moeda por tipo de carta diferente nos seus grids.",
            {},
            combo=DiversityBonus(resource=COINS, amount=1),
        ),
    ),
    _card(
        "city-factory", "Fábrica de Tijolos", CardType.CITY, _amounts(coins=5, materials=1), Rarity.RARE,
        _turn("Produz 2 materiais por turno, consumindo 1 comida.", _amounts(materials=2, food=-1)),
    ),
    _card(
        "city-hospital", "Posto de Saúde", CardType.CITY, _amounts(coins=4, materials=2, population=1), Rarity.UNCOMMON,
        _dice("Recupera 1 população quando ativado por dado 4.", (4,), _amounts(population=1)),
    ),
    _card(
        "city-refugee-camp", "Campo de Refugiados", CardType.CITY, _amounts(coins=2, food=2), Rarity.UNCOMMON,
        _instant("Ganhe 2 população imediatamente.", _amounts(population=2)),
    ),
    _card(
        "city-palace", "Palácio Real", CardType.CITY, _amounts(coins=8, materials=6, population=2), Rarity.LEGENDARY,
        _instant("Fornece 3 população e +2 reputação.", _amounts(population=3), reputation=2),
    ),
)

ACTION_CARDS: tuple[Card, ...] = (
    _card(
        "starter-harvest", "Colheita Básica", CardType.ACTION, {}, Rarity.STARTER,
        _instant("Ganhe 1 comida instantaneamente.", _amounts(food=1)),
    ),
    _card(
        "starter-shop", "Comércio Simples", CardType.ACTION, {}, Rarity.STARTER,
        _instant("Ganhe 1 moeda instantaneamente.", _amounts(coins=1)),
    ),
    _card(
        "action-harvest", "Colheita", CardType.ACTION, _amounts(coins=1), Rarity.COMMON,
        _instant("Ganhe 2 comida instantaneamente.", _amounts(food=2)),
    ),
    _card(
        "action-trade", "Troca Comercial", CardType.ACTION, _amounts(materials=2), Rarity.COMMON,
        _instant("Troque 2 materiais por 2 comidas.", _amounts(food=2)),
    ),
    _card(
        "action-hire", "Contratar Trabalhadores", CardType.ACTION, _amounts(coins=2), Rarity.COMMON,
        _instant("Ganhe 1 população instantaneamente.", _amounts(population=1)),
    ),
    _card(
        "action-quick-loan", "Empréstimo Rápido", CardType.ACTION, {}, Rarity.UNCOMMON,
        _instant("Ganhe 3 moedas, mas descarte 1 carta no próximo turno.", _amounts(coins=3), discard_next_turn=1),
    ),
    _card(
        "action-scouting", "Batedores", CardType.ACTION, _amounts(coins=1), Rarity.UNCOMMON,
        _instant("Compre 1 carta extra no próximo turno.", buy_extra_card=1),
    ),
    _card(
        "action-lucky-charm", "Amuleto da Sorte", CardType.ACTION, _amounts(coins=2), Rarity.UNCOMMON,
        _instant("Role o dado mais uma vez neste turno.", extra_dice_roll=1),
    ),
    _card(
        "emergency-response", "Resposta de Emergência", CardType.ACTION, _amounts(coins=2, materials=1), Rarity.UNCOMMON,
        _instant(
            "Protege contra o próximo evento de crise.",
            grants=frozenset({StateFlag.CRISIS_PROTECTION}),
        ),
    ),
    _card(
        "action-weather-forecast", "Previsão do Tempo", CardType.ACTION, _amounts(coins=1), Rarity.COMMON,
        _instant(
            "Evita o próximo evento climático.",
            grants=frozenset({StateFlag.WEATHER_PREDICTION}),
        ),
    ),
    _card(
        "action-trade-agreement", "Acordo Comercial", CardType.ACTION, _amounts(coins=3), Rarity.RARE,
        _instant(
            "Cartas de ação pagas rendem +1 de cada recurso produzido.",
            grants=frozenset({StateFlag.ENHANCED_TRADING}),
        ),
    ),
    _card(
        "action-heroic-effort", "Esforço Heroico", CardType.ACTION, _amounts(coins=2, food=1), Rarity.BOOSTER,
        _instant("Ganhe 1 material e 1 comida instantaneamente.", _amounts(food=1, materials=1)),
    ),
    _card(
        "action-public-festival", "Festa Popular", CardType.ACTION, _amounts(coins=2, food=2), Rarity.UNCOMMON,
        _instant("Ganhe +1 reputação.", reputation=1),
    ),
)

LANDMARK_CARDS: tuple[Card, ...] = (
    _card(
        "landmark-gate", "Portão da Cidade", CardType.LANDMARK, _amounts(coins=6, materials=4), Rarity.LEGENDARY,
        _instant(
            "Fornece +2 reputação e defesa contra o próximo evento.",
            reputation=2,
            grants=frozenset({StateFlag.CRISIS_PROTECTION}),
        ),
    ),
    _card(
        "landmark-obelisk", "Obelisco Antigo", CardType.LANDMARK,
        _amounts(coins=10, food=5, materials=10, population=3), Rarity.LEGENDARY,
        _instant("Garante 1 marco e +5 reputação.", reputation=5),
    ),
    _card(
        "landmark-cathedral", "Grande Catedral", CardType.LANDMARK,
        _amounts(coins=12, materials=8, population=3), Rarity.LEGENDARY,
        CardEffect(
            description="Dobra toda a produção.",
            reputation=3,
            combo=GlobalMultiplier(factor=2.0),
        ),
    ),
)

EVENT_CARDS: tuple[Card, ...] = (
    _card(
        "event-drought", "Seca", CardType.EVENT, {}, Rarity.CRISIS,
        _crisis("Fazendas produzem metade por 2 turnos.", CrisisEffect.REDUCE_FARM_PRODUCTION, 2),
    ),
    _card(
        "event-storm", "Tempestade Repentina", CardType.EVENT, {}, Rarity.CRISIS,
        _crisis("Ganhe 1 comida; cidades produzem 70% por 1 turno.", CrisisEffect.STORM, 1),
    ),
    _card(
        "event-plague", "Praga Devastadora", CardType.EVENT, {}, Rarity.CRISIS,
        _crisis("Perca 2 população e receba 5 moedas de compensação.", CrisisEffect.LOSE_POPULATION, 1),
    ),
    _card(
        "event-scandal", "Escândalo", CardType.EVENT, {}, Rarity.CRISIS,
        _crisis("Perca 1 reputação.", CrisisEffect.SCANDAL, 1),
    ),
    _card(
        "event-trade-boom", "Alta do Comércio", CardType.EVENT, _amounts(coins=2), Rarity.UNCOMMON,
        _crisis("Cidades produzem o dobro por 2 turnos.", CrisisEffect.BOOST_CITY_PRODUCTION, 2),
    ),
    _card(
        "event-good-harvest", "Festival da Colheita", CardType.EVENT, _amounts(coins=2, food=2), Rarity.UNCOMMON,
        _crisis("Fazendas produzem o dobro por 2 turnos.", CrisisEffect.BOOST_FARM_PRODUCTION, 2),
    ),
)

DEFAULT_CARDS: tuple[Card, ...] = FARM_CARDS + CITY_CARDS + ACTION_CARDS + LANDMARK_CARDS + EVENT_CARDS
