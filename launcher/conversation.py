"""
Guided text entry for custom deploys.

Turns free-text replies into session answers: each reply is checked for the
field the cursor is on, stored, and answered with the next prompt or, after
the last field, with a summary awaiting confirmation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from launcher.database.sessions import Session, SessionStore
from launcher.errors import ValidationError
from launcher.models.deployment import Target
from launcher.models.params import (
    EVM_DEFAULT_DECIMALS,
    EVM_NETWORKS,
    SOLANA_NETWORKS,
    parse_decimals,
    parse_supply,
)

logger = logging.getLogger(__name__)

PROMPTS: Dict[Target, Dict[str, str]] = {
    Target.METAPLEX: {
        "name": "Enter the token name:",
        "symbol": "Enter the token symbol:",
        "tokens": "Enter the token supply (for example: 1000000000):",
        "uri": "Enter the metadata URI:",
        "network": f"Solana network? Reply with: {' or '.join(SOLANA_NETWORKS)}",
    },
    Target.EVM: {
        "name": "Enter the token name:",
        "symbol": "Enter the token symbol:",
        "decimals": f"Enter decimals (usually {EVM_DEFAULT_DECIMALS}):",
        "network": f"Choose a network: {' / '.join(EVM_NETWORKS)}",
    },
}

SUMMARY_TITLES = {
    Target.METAPLEX: "Metaplex parameters:",
    Target.EVM: "EVM parameters:",
}


@dataclass(frozen=True)
class Reply:
    """Text to send back after a free-text message"""
    text: str
    ready: bool = False  # show the deploy / cancel buttons
    target: Optional[Target] = None


def _required_text(value: str, label: str) -> str:
    if not value:
        raise ValidationError(f"{label} cannot be empty.")
    return value


def _check_supply(value: str) -> str:
    if parse_supply(value) <= 0:
        raise ValidationError("Token supply must be a positive number.")
    return value


def _check_decimals(value: str) -> str:
    if not value:
        return str(EVM_DEFAULT_DECIMALS)
    if parse_decimals(value) is None:
        raise ValidationError("Decimals must be a whole number of 0 or more.")
    return value


def _network_check(allowed) -> Callable[[str], str]:
    def check(value: str) -> str:
        network = value.lower()
        if network not in allowed:
            raise ValidationError(f"Unknown network {value!r}. Choose one of: {', '.join(allowed)}")
        return network
    return check


FIELD_CHECKS: Dict[Target, Dict[str, Callable[[str], str]]] = {
    Target.METAPLEX: {
        "name": lambda v: _required_text(v, "Name"),
        "symbol": lambda v: _required_text(v, "Symbol"),
        "tokens": _check_supply,
        "uri": lambda v: _required_text(v, "URI"),
        "network": _network_check(SOLANA_NETWORKS),
    },
    Target.EVM: {
        "name": lambda v: _required_text(v, "Name"),
        "symbol": lambda v: _required_text(v, "Symbol"),
        "decimals": _check_decimals,
        "network": _network_check(EVM_NETWORKS),
    },
}


def prompt_for(session: Session) -> str:
    return PROMPTS[session.target][session.current_field]


def start_custom_flow(store: SessionStore, user_id: int, target: Target) -> str:
    """Open a fresh session and return the first prompt"""
    session = store.start(user_id, target)
    return prompt_for(session)


def summarize(session: Session) -> str:
    lines = [SUMMARY_TITLES[session.target]]
    lines += [f"{name}={session.collected.get(name, '')}" for name in session.fields]
    lines += ["", "Confirm deploy?"]
    return "\n".join(lines)


def handle_reply(store: SessionStore, user_id: int, text: str) -> Optional[Reply]:
    """Feed one free-text message into the user's session.

    Returns None when there is nothing to answer: no session, or a session
    that is already waiting for the confirm button.
    """
    session = store.get(user_id)
    if session is None or session.ready:
        return None

    field_name = session.current_field
    check = FIELD_CHECKS[session.target][field_name]
    try:
        value = check(text.strip())
    except ValidationError as e:
        logger.debug(f"User {user_id} gave invalid {field_name}: {e}")
        return Reply(f"❌ {e}\n\n{prompt_for(session)}", target=session.target)

    session.answer(value)
    store.set(user_id, session)

    if session.ready:
        return Reply(summarize(session), ready=True, target=session.target)
    return Reply(prompt_for(session), target=session.target)
