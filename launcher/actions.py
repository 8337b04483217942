"""
Inline keyboard callback data, decoded once into a closed set of actions
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from launcher.models.deployment import Target

CUSTOM_ID = "custom"


class ActionKind(Enum):
    BACK_MAIN = "back_main"
    SECTION_MENU = "menu"  # menu_<target>
    TEMPLATE_LIST = "template_list"  # <target>_template
    CUSTOM_FLOW = "custom_flow"  # <target>_custom
    TEMPLATE_PREVIEW = "template"  # template_<target>_<id>
    CONFIRM_TEMPLATE = "confirm_template"  # confirm_<target>_<id>
    CONFIRM_CUSTOM = "confirm_custom"  # confirm_<target>_custom
    CHECK_BALANCE = "check_balance"
    MY_DEPLOYS = "my_deploys"
    HELP = "help"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    target: Optional[Target] = None
    template_id: Optional[str] = None


_SIMPLE = {
    "back_main": ActionKind.BACK_MAIN,
    "check_balance": ActionKind.CHECK_BALANCE,
    "my_deploys": ActionKind.MY_DEPLOYS,
    "help": ActionKind.HELP,
}


def _split_target(rest: str):
    """'evm_my_token' -> (Target.EVM, 'my_token')"""
    head, _, tail = rest.partition("_")
    return Target.parse(head), tail


def parse_action(data: Optional[str]) -> Action:
    """Decode callback_data; anything unrecognised becomes UNKNOWN"""
    if not data:
        return Action(ActionKind.UNKNOWN)

    if data in _SIMPLE:
        return Action(_SIMPLE[data])

    if data.startswith("menu_"):
        target = Target.parse(data[len("menu_"):])
        if target:
            return Action(ActionKind.SECTION_MENU, target)
        return Action(ActionKind.UNKNOWN)

    if data.startswith("template_"):
        target, template_id = _split_target(data[len("template_"):])
        if target and template_id:
            return Action(ActionKind.TEMPLATE_PREVIEW, target, template_id)
        return Action(ActionKind.UNKNOWN)

    if data.startswith("confirm_"):
        target, template_id = _split_target(data[len("confirm_"):])
        if not target or not template_id:
            return Action(ActionKind.UNKNOWN)
        if template_id == CUSTOM_ID:
            return Action(ActionKind.CONFIRM_CUSTOM, target)
        return Action(ActionKind.CONFIRM_TEMPLATE, target, template_id)

    target, suffix = _split_target(data)
    if target and suffix == "template":
        return Action(ActionKind.TEMPLATE_LIST, target)
    if target and suffix == CUSTOM_ID:
        return Action(ActionKind.CUSTOM_FLOW, target)

    return Action(ActionKind.UNKNOWN)


def encode_action(action: Action) -> str:
    """Inverse of parse_action, used to build keyboards"""
    kind, target = action.kind, action.target
    if kind is ActionKind.SECTION_MENU:
        return f"menu_{target.value}"
    if kind is ActionKind.TEMPLATE_LIST:
        return f"{target.value}_template"
    if kind is ActionKind.CUSTOM_FLOW:
        return f"{target.value}_{CUSTOM_ID}"
    if kind is ActionKind.TEMPLATE_PREVIEW:
        return f"template_{target.value}_{action.template_id}"
    if kind is ActionKind.CONFIRM_TEMPLATE:
        return f"confirm_{target.value}_{action.template_id}"
    if kind is ActionKind.CONFIRM_CUSTOM:
        return f"confirm_{target.value}_{CUSTOM_ID}"
    if kind is ActionKind.UNKNOWN:
        raise ValueError("UNKNOWN actions have no callback data")
    return kind.value
