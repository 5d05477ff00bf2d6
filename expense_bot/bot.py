import asyncio
import logging

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from expense_bot.config import Settings, settings
from expense_bot.errors import StoreUnavailableError
from expense_bot.router import MONTHLY_REPORT_COMMAND, WEEKLY_REPORT_COMMAND, MessageRouter
from expense_bot.service import ExpenseService
from expense_bot.store import ExpenseStore

logger = logging.getLogger(__name__)

STORE_ERROR_REPLY = "Не удалось обратиться к таблице расходов. Попробуйте ещё раз позже."


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    message = update.message
    if message is None or not message.text:
        return

    router: MessageRouter = context.bot_data["router"]
    logger.info(f"Chat {message.chat_id}: {message.text}")
    received_on = router.service.local_date(message.date)

    try:
        reply = await asyncio.to_thread(router.handle, message.text, received_on)
    except StoreUnavailableError:
        logger.exception(f"Spreadsheet call failed for message {message.text!r}")
        reply = STORE_ERROR_REPLY

    try:
        await message.reply_text(reply)
    except TelegramError as e:
        logger.error(f"Could not deliver reply to chat {message.chat_id}: {e}")


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    logger.error(f"Unhandled error while processing update {update}", exc_info=context.error)


async def post_init(application: Application):
    router: MessageRouter = application.bot_data["router"]
    if not router.bot_username:
        router.bot_username = application.bot.username or ""
    await application.bot.set_my_commands([
        ("start", "Как записывать расходы"),
        (WEEKLY_REPORT_COMMAND.lstrip("/"), "Отчет за текущую неделю"),
        (MONTHLY_REPORT_COMMAND.lstrip("/"), "Отчет за прошлый месяц"),
    ])
    logger.info(f"Running as @{router.bot_username}")


def build_application(config: Settings = settings, store: ExpenseStore | None = None) -> Application:
    service = ExpenseService.from_settings(config, store)
    app = ApplicationBuilder().token(config.telegram_bot_token).build()
    app.bot_data["router"] = MessageRouter(service, config.bot_username)
    app.add_handler(MessageHandler(filters.TEXT, handle_message))
    app.add_error_handler(on_error)
    app.post_init = post_init
    return app


def main():
    logging.basicConfig(level=settings.log_level)
    if not settings.telegram_bot_token:
        raise SystemExit("TELEGRAM_BOT_TOKEN is not set")

    app = build_application()
    logger.info("Bot started. Polling for messages...")
    app.run_polling(allowed_updates=[Update.MESSAGE])


if __name__ == "__main__":
    main()
