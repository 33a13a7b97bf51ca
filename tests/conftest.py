"""Shared fixtures for the Euchre engine tests."""

from dataclasses import replace

import numpy as np
import pytest

from euchre_engine.card import Card
from euchre_engine.deck import full_deck
from euchre_engine.game import create_game, join_game, start_game
from euchre_engine.round import Round


@pytest.fixture
def rng():
    """Seeded generator so deals are reproducible"""
    return np.random.default_rng(1234)


@pytest.fixture
def make_round():
    """
    Build a round with chosen hands.

    Hands are given as {seat: ["9H", "JD", ...]}; without them the
    unshuffled deck is dealt in seat order. The up-card defaults to the
    first undealt card and may never be one already in a hand.
    """

    def _make(dealer_seat=0, up_card=None, hands=None, **changes):
        if hands is None:
            deck = full_deck()
            dealt = {seat: tuple(deck[seat * 5:(seat + 1) * 5]) for seat in range(4)}
        else:
            dealt = {
                seat: tuple(Card.from_string(code) for code in codes)
                for seat, codes in hands.items()
            }
        held = {card for cards in dealt.values() for card in cards}
        if up_card is None:
            up = next(card for card in full_deck() if card not in held)
        else:
            up = Card.from_string(up_card)
            if up in held:
                raise ValueError(f"Up-card {up_card} is already dealt")
        round_ = Round(
            number=1,
            dealer_seat=dealer_seat,
            up_card=up,
            hands=dealt,
            current_bidder_seat=(dealer_seat + 1) % 4,
        )
        return replace(round_, **changes) if changes else round_

    return _make


@pytest.fixture
def waiting_game():
    """A game with four joined players, not yet started"""
    game = create_game("TESTGAME")
    for i in range(4):
        game, _ = join_game(game, f"session-{i}", f"Player {i + 1}")
    return game


@pytest.fixture
def active_game(waiting_game, rng):
    """A started game with round 1 dealt"""
    return start_game(waiting_game, rng)
