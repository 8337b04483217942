"""Tests for callback data decoding and dispatch coverage."""

import pytest

import telegram_deploy_bot as bot
from launcher.actions import Action, ActionKind, encode_action, parse_action
from launcher.models.deployment import Target


@pytest.mark.parametrize("data, expected", [
    ("back_main", Action(ActionKind.BACK_MAIN)),
    ("check_balance", Action(ActionKind.CHECK_BALANCE)),
    ("my_deploys", Action(ActionKind.MY_DEPLOYS)),
    ("help", Action(ActionKind.HELP)),
    ("menu_metaplex", Action(ActionKind.SECTION_MENU, Target.METAPLEX)),
    ("menu_evm", Action(ActionKind.SECTION_MENU, Target.EVM)),
    ("metaplex_template", Action(ActionKind.TEMPLATE_LIST, Target.METAPLEX)),
    ("evm_custom", Action(ActionKind.CUSTOM_FLOW, Target.EVM)),
    ("template_evm_base_std", Action(ActionKind.TEMPLATE_PREVIEW, Target.EVM, "base_std")),
    ("confirm_metaplex_meme_1b", Action(ActionKind.CONFIRM_TEMPLATE, Target.METAPLEX, "meme_1b")),
    ("confirm_metaplex_custom", Action(ActionKind.CONFIRM_CUSTOM, Target.METAPLEX)),
    ("confirm_evm_custom", Action(ActionKind.CONFIRM_CUSTOM, Target.EVM)),
])
def test_parse_known_actions(data, expected):
    assert parse_action(data) == expected


@pytest.mark.parametrize("data", [
    None, "", "menu_solana", "template_evm_", "template_cosmos_x", "confirm_evm",
    "evm_other", "something_else", "gas",
])
def test_parse_unknown_actions(data):
    assert parse_action(data).kind is ActionKind.UNKNOWN


@pytest.mark.parametrize("action", [
    Action(ActionKind.BACK_MAIN),
    Action(ActionKind.SECTION_MENU, Target.EVM),
    Action(ActionKind.TEMPLATE_LIST, Target.METAPLEX),
    Action(ActionKind.CUSTOM_FLOW, Target.METAPLEX),
    Action(ActionKind.TEMPLATE_PREVIEW, Target.METAPLEX, "a_b_c"),
    Action(ActionKind.CONFIRM_TEMPLATE, Target.EVM, "x"),
    Action(ActionKind.CONFIRM_CUSTOM, Target.EVM),
    Action(ActionKind.CHECK_BALANCE),
])
def test_encoded_actions_decode_back(action):
    assert parse_action(encode_action(action)) == action


def test_unknown_cannot_be_encoded():
    with pytest.raises(ValueError):
        encode_action(Action(ActionKind.UNKNOWN))


def test_every_action_kind_has_a_handler():
    assert set(bot.ACTION_HANDLERS) == set(ActionKind)
