"""
USSD menu state machine.

The gateway sends the *entire* accumulated input each turn
(``"1*4821*12345678901"``), so the conversation state is a pure function
of the parsed tokens and the stored session:

    level 0                      → MainMenu
    level 1, not authenticated   → FeatureSelect(choice)
    level 2, not authenticated   → Authenticating(feature, pin)
    level 2, authenticated       → AwaitingSearchTerm(feature)   (retry)
    level ≥ 3, authenticated     → Authenticated(officer, feature, term)
    anything else                → InvalidRequest(reason)

``resolve_state`` performs no I/O; ``ussd.gateway`` executes the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .models import Feature

if TYPE_CHECKING:
    from .sessions import UssdSession


def parse_input(text: str | None, separator: str = "*") -> list[str]:
    """Split accumulated input into non-blank, stripped tokens."""
    if not text:
        return []
    return [token.strip() for token in text.split(separator) if token.strip()]


def menu_level(text: str | None, separator: str = "*") -> int:
    return len(parse_input(text, separator))


def feature_for_choice(choice: str) -> Feature | None:
    try:
        return Feature(choice)
    except ValueError:
        return None


# ════════════════════════════════════════════════════════════════════
#  States
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MainMenu:
    pass


@dataclass(frozen=True)
class FeatureSelect:
    choice: str

    @property
    def feature(self) -> Feature | None:
        return feature_for_choice(self.choice)


@dataclass(frozen=True)
class Authenticating:
    feature: Feature
    pin: str


@dataclass(frozen=True)
class AwaitingSearchTerm:
    feature: Feature


@dataclass(frozen=True)
class Authenticated:
    officer_id: int
    feature: Feature
    search_term: str


@dataclass(frozen=True)
class InvalidRequest:
    reason: str


MenuState = Union[
    MainMenu,
    FeatureSelect,
    Authenticating,
    AwaitingSearchTerm,
    Authenticated,
    InvalidRequest,
]


# ════════════════════════════════════════════════════════════════════
#  Transition
# ════════════════════════════════════════════════════════════════════

def resolve_state(tokens: list[str], session: UssdSession | None) -> MenuState:
    """
    Map (tokens, session) to exactly one ``MenuState``.

    The feature for an authenticating turn comes from ``tokens[0]`` so a
    replayed turn on a fresh session still resolves; once authenticated,
    the feature bound in the session wins.
    """
    level = len(tokens)
    authenticated = session is not None and session.is_authenticated

    if level == 0:
        return MainMenu()

    if not authenticated:
        if level == 1:
            return FeatureSelect(choice=tokens[0])
        if level == 2:
            feature = feature_for_choice(tokens[0])
            if feature is None:
                return InvalidRequest("unknown feature")
            return Authenticating(feature=feature, pin=tokens[1])
        return InvalidRequest("not authenticated")

    feature = session.feature
    if feature is None:
        return InvalidRequest("no feature selected")
    if level == 1:
        return InvalidRequest("authenticated session back at feature selection")
    if level == 2:
        return AwaitingSearchTerm(feature=feature)
    return Authenticated(
        officer_id=session.officer_id,
        feature=feature,
        search_term=tokens[-1],
    )
