#!/usr/bin/env python3
"""
Telegram Bot for Solana (Metaplex) and EVM (Foundry) token launches
Templates or guided custom entry, balances and per-user deploy history
"""

import logging
import os
import sys
from dataclasses import dataclass

import telegram
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes, MessageHandler, filters

from launcher.actions import Action, ActionKind, encode_action, parse_action
from launcher.config import Settings, load_settings
from launcher.conversation import handle_reply, start_custom_flow
from launcher.database import HistoryLedger, SessionStore
from launcher.errors import AccessDenied, ConfigError
from launcher.models.deployment import Target
from launcher.orchestrator import BalanceChecker, EvmDeployer, MetaplexDeployer
from launcher.services.process_runner import ProcessRunner
from launcher.templates import TemplateCatalog, load_templates

logger = logging.getLogger(__name__)

SECTION_TITLES = {
    Target.METAPLEX: "🎨 Solana / Metaplex",
    Target.EVM: "⚡ EVM Deploy",
}

ACCESS_DENIED_TEXT = "❌ You do not have access to this bot."


def setup_logging(level: str = "INFO"):
    """Console plus logs/bot.log"""
    os.makedirs('logs', exist_ok=True)
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level, logging.INFO),
    )
    file_handler = logging.FileHandler('logs/bot.log', encoding='utf-8')
    file_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)s | %(name)s | %(message)s'))
    logging.getLogger().addHandler(file_handler)

    # Reduce noise from httpx (Telegram API requests)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass
class BotServices:
    """Process-wide state shared by all handlers (kept in bot_data)"""
    settings: Settings
    templates: TemplateCatalog
    sessions: SessionStore
    history: HistoryLedger
    metaplex: MetaplexDeployer
    evm: EvmDeployer
    balances: BalanceChecker

    @classmethod
    def create(cls, settings: Settings, templates: TemplateCatalog) -> "BotServices":
        sessions = SessionStore()
        history = HistoryLedger()
        runner = ProcessRunner()
        return cls(
            settings=settings,
            templates=templates,
            sessions=sessions,
            history=history,
            metaplex=MetaplexDeployer(settings, history, sessions, runner),
            evm=EvmDeployer(settings, history, sessions, runner),
            balances=BalanceChecker(settings, runner),
        )

    def deployer_for(self, target: Target):
        return self.metaplex if target is Target.METAPLEX else self.evm


def get_services(context: ContextTypes.DEFAULT_TYPE) -> BotServices:
    return context.application.bot_data["services"]


# Keyboards

def _button(text: str, action: Action) -> list:
    return [InlineKeyboardButton(text, callback_data=encode_action(action))]


def main_menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        _button("🎨 Solana (Metaplex)", Action(ActionKind.SECTION_MENU, Target.METAPLEX)),
        _button("⚡ EVM Token Deploy", Action(ActionKind.SECTION_MENU, Target.EVM)),
        _button("💰 Check balances", Action(ActionKind.CHECK_BALANCE)),
        _button("📋 My deploys", Action(ActionKind.MY_DEPLOYS)),
        _button("ℹ️ Help", Action(ActionKind.HELP)),
    ])


def section_menu_keyboard(target: Target) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        _button("📝 Choose a template", Action(ActionKind.TEMPLATE_LIST, target)),
        _button("✏️ Custom deploy", Action(ActionKind.CUSTOM_FLOW, target)),
        _button("◀️ Back", Action(ActionKind.BACK_MAIN)),
    ])


def template_list_keyboard(templates: TemplateCatalog, target: Target) -> InlineKeyboardMarkup:
    keyboard = [
        _button(template.name, Action(ActionKind.TEMPLATE_PREVIEW, target, template.id))
        for template in templates.list(target)
    ]
    keyboard.append(_button("◀️ Back", Action(ActionKind.SECTION_MENU, target)))
    return InlineKeyboardMarkup(keyboard)


def confirm_keyboard(confirm: Action, back_text: str, back: Action) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        _button("✅ Deploy", confirm),
        _button(back_text, back),
    ])


# Message helpers

async def safe_edit_message(query, message: str, reply_markup=None):
    """Safely edit a callback query message with error handling"""
    try:
        await query.edit_message_text(message, reply_markup=reply_markup)
    except telegram.error.BadRequest as e:
        error_str = str(e)

        if "Message is not modified" in error_str:
            # Message content is identical - nothing to do
            return

        if "Message to edit not found" in error_str or "Message can't be edited" in error_str:
            # Message was deleted by user or expired - send a fresh one instead
            logger.warning(f"Message no longer exists, sending new one: {e}")
            await query.message.reply_text(message, reply_markup=reply_markup)
            return

        # Don't re-raise to prevent crashes - just log
        logger.error(f"Unhandled Telegram error in safe_edit_message: {e}")


async def send_text(update: Update, message: str, reply_markup=None):
    """Reply in the chat the update came from"""
    chat = update.effective_chat
    try:
        await chat.send_message(message, reply_markup=reply_markup)
    except telegram.error.TelegramError as e:
        logger.error(f"Failed to send message to chat {chat.id}: {e}")


async def ensure_allowed(update: Update, services: BotServices, reply: bool = True) -> bool:
    user_id = update.effective_user.id
    try:
        services.settings.check_access(user_id)
    except AccessDenied as e:
        logger.warning(str(e))
        if reply:
            await send_text(update, ACCESS_DENIED_TEXT)
        return False
    return True


# Command handlers

async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Reset any pending input and show the main menu"""
    services = get_services(context)
    if not await ensure_allowed(update, services):
        return

    services.sessions.delete(update.effective_user.id)
    await send_text(
        update,
        "🚀 Crypto Deploy Bot\n\n"
        "Two launch paths:\n"
        "• Solana via Metaplex\n"
        "• EVM via Foundry\n\n"
        "Choose an action:",
        main_menu_keyboard(),
    )


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    services = get_services(context)
    if not await ensure_allowed(update, services):
        return

    services.sessions.delete(update.effective_user.id)
    await send_text(update, "Session reset.", main_menu_keyboard())


async def text_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Free-text answers for the custom flow; ignored when no flow is open"""
    services = get_services(context)
    if not await ensure_allowed(update, services, reply=False):
        return

    reply = handle_reply(services.sessions, update.effective_user.id, update.message.text)
    if reply is None:
        return

    reply_markup = None
    if reply.ready:
        reply_markup = confirm_keyboard(
            Action(ActionKind.CONFIRM_CUSTOM, reply.target),
            "❌ Cancel",
            Action(ActionKind.BACK_MAIN),
        )
    await send_text(update, reply.text, reply_markup)


# Callback actions

async def show_main_menu(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    services.sessions.delete(update.effective_user.id)
    await safe_edit_message(update.callback_query, "🚀 Main menu", main_menu_keyboard())


async def show_section_menu(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    await safe_edit_message(
        update.callback_query,
        f"{SECTION_TITLES[action.target]}\n\nChoose a deploy mode:",
        section_menu_keyboard(action.target),
    )


async def show_template_list(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    label = "Metaplex" if action.target is Target.METAPLEX else "EVM"
    await safe_edit_message(
        update.callback_query,
        f"📝 {label} templates:",
        template_list_keyboard(services.templates, action.target),
    )


async def begin_custom_flow(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    prompt = start_custom_flow(services.sessions, update.effective_user.id, action.target)
    await send_text(update, prompt)


async def show_template_preview(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    template = services.templates.get(action.target, action.template_id)
    if template is None:
        await send_text(update, "❌ Template not found.")
        return

    lines = [f"Template: {template.name}", template.description, "", "Parameters:"]
    lines += template.describe_params()
    lines += ["", "Confirm deploy?"]
    await send_text(
        update,
        "\n".join(lines),
        confirm_keyboard(
            Action(ActionKind.CONFIRM_TEMPLATE, action.target, template.id),
            "◀️ Back",
            Action(ActionKind.TEMPLATE_LIST, action.target),
        ),
    )


async def _run_deploy(update: Update, services: BotServices, target: Target, raw_params, session=None):
    async def notify(text: str):
        await send_text(update, text)

    outcome = await services.deployer_for(target).deploy(
        update.effective_user.id, raw_params, notify=notify, session=session
    )
    await send_text(update, outcome.message)


async def confirm_template(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    template = services.templates.get(action.target, action.template_id)
    if template is None:
        await send_text(update, "❌ Template not found.")
        return
    await _run_deploy(update, services, action.target, template.params)


async def confirm_custom(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    user_id = update.effective_user.id
    session = services.sessions.get(user_id)
    if session is None or session.target is not action.target or not session.ready:
        await send_text(update, "❌ No finished custom session found. Start again from the menu.")
        return
    # taken before the first await so a second tap finds nothing to deploy
    services.sessions.pop(user_id)
    await _run_deploy(update, services, action.target, dict(session.collected), session=session)


async def check_balances(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    services = get_services(context)
    await send_text(update, await services.balances.report())


async def show_history(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    """Show recent deployment history"""
    services = get_services(context)
    entries = services.history.list(update.effective_user.id)
    if not entries:
        await send_text(update, "📋 No deploys yet. Make your first one!")
        return

    lines = ["📋 Recent deploys:"]
    for index, entry in enumerate(entries, start=1):
        status_emoji = "✅" if entry.succeeded else "❌"
        date = entry.timestamp.strftime("%b %d %H:%M UTC")
        lines.append("")
        lines.append(f"{index}. {status_emoji} {entry.target.value.upper()} | {date}")
        lines.append(entry.summary)
    await send_text(update, "\n".join(lines))


async def show_help(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    await send_text(
        update,
        "ℹ️ Help\n\n"
        "1) Configure .env\n"
        "- TELEGRAM_BOT_TOKEN\n"
        "- SOL_KEYPAIR\n"
        "- EVM_PRIVATE_KEY\n"
        "- ALLOWED_USERS (optional)\n\n"
        "2) Run: python telegram_deploy_bot.py\n\n"
        "/cancel resets the current input.",
    )


async def ignore_unknown(update: Update, context: ContextTypes.DEFAULT_TYPE, action: Action):
    logger.debug(f"Ignoring unknown callback data: {update.callback_query.data!r}")


ACTION_HANDLERS = {
    ActionKind.BACK_MAIN: show_main_menu,
    ActionKind.SECTION_MENU: show_section_menu,
    ActionKind.TEMPLATE_LIST: show_template_list,
    ActionKind.CUSTOM_FLOW: begin_custom_flow,
    ActionKind.TEMPLATE_PREVIEW: show_template_preview,
    ActionKind.CONFIRM_TEMPLATE: confirm_template,
    ActionKind.CONFIRM_CUSTOM: confirm_custom,
    ActionKind.CHECK_BALANCE: check_balances,
    ActionKind.MY_DEPLOYS: show_history,
    ActionKind.HELP: show_help,
    ActionKind.UNKNOWN: ignore_unknown,
}


async def button_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle button presses"""
    query = update.callback_query
    try:
        await query.answer()
    except telegram.error.TelegramError as e:
        # answering is only an acknowledgement, the action still runs
        logger.debug(f"Callback answer failed: {e}")

    services = get_services(context)
    if not await ensure_allowed(update, services):
        return

    action = parse_action(query.data)
    await ACTION_HANDLERS[action.kind](update, context, action)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log transport and handler errors; polling keeps running"""
    logger.error(f"Error while handling update: {context.error}", exc_info=context.error)


def build_application(settings: Settings, templates: TemplateCatalog) -> Application:
    # concurrent updates: a long deploy for one user must not block everyone else
    application = Application.builder().token(settings.bot_token).concurrent_updates(True).build()
    application.bot_data["services"] = BotServices.create(settings, templates)

    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("cancel", cancel))
    application.add_handler(CallbackQueryHandler(button_callback))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, text_message))
    application.add_error_handler(error_handler)
    return application


def main():
    """Start the bot"""
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"❌ {e}")
        if "TELEGRAM_BOT_TOKEN" in str(e):
            print("1. Create a bot with @BotFather on Telegram")
            print("2. Add TELEGRAM_BOT_TOKEN to .env")
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        templates = load_templates(settings.templates_path)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    application = build_application(settings, templates)

    access = "open" if settings.allowed_users is None else f"{len(settings.allowed_users)} allowed users"
    logger.info(f"🤖 Bot started (Metaplex + EVM mode), access: {access}")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == '__main__':
    main()
