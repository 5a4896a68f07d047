"""Prompt guard - pre-screens raw user text before it reaches intent generation.

Rules are evaluated in priority order and the first match wins, so text that matches
both the self-harm and the weaponization rule gets the self-harm crisis response.
Matching runs on normalised text (lower-cased, punctuation folded to spaces, whitespace
collapsed) so minor punctuation or spacing variations still match.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal

from backend.assistant.utils.metrics import prompt_guard_blocks_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardAllowed:
    """Input may proceed to intent generation."""

    allow: Literal[True] = True


@dataclass(frozen=True)
class GuardBlocked:
    """Input was blocked; ``message`` is shown to the user instead of a reply."""

    reason: str
    message: str
    allow: Literal[False] = False


GuardResult = GuardAllowed | GuardBlocked


@dataclass(frozen=True)
class GuardRule:
    """Blocking rule evaluated against normalised text."""

    pattern: re.Pattern[str]
    reason: str
    message: str


BLOCK_RULES: tuple[GuardRule, ...] = (
    GuardRule(
        pattern=re.compile(r"\b(suicide|suicidal|self ?harm|kill ?my ?self|end my life)\b"),
        reason="self_harm",
        message=(
            "I'm really sorry you're feeling this way. I can't help with that, but please "
            "reach out to local emergency services or a trusted person immediately."
        ),
    ),
    GuardRule(
        pattern=re.compile(
            r"\b(make|build|buy|making|building|buying) (an? )?(weapons?|bombs?|explosives?)\b"
        ),
        reason="weaponization",
        message="I can't help with that. Let's focus on planning a great trip experience instead.",
    ),
)

_NON_WORD = re.compile(r"[\W_]+")


def normalize(text: str) -> str:
    """Lower-case and fold punctuation and whitespace runs into single spaces."""
    return _NON_WORD.sub(" ", text.lower()).strip()


def check(text: str, rules: tuple[GuardRule, ...] = BLOCK_RULES) -> GuardResult:
    """Return the first matching block, or ``GuardAllowed`` when nothing matches."""
    normalized = normalize(text)
    for rule in rules:
        if rule.pattern.search(normalized):
            prompt_guard_blocks_total.labels(reason=rule.reason).inc()
            logger.info(
                "Prompt guard blocked input",
                extra={"structured": {"reason": rule.reason, "length": len(text)}},
            )
            return GuardBlocked(reason=rule.reason, message=rule.message)
    return GuardAllowed()
