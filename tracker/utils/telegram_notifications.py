import asyncio
import logging
from flask import current_app
from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError
from tracker.utils.errors import ProviderError

logger = logging.getLogger(__name__)

DELIVERY_STATUS_SENT = 'sent'


def get_bot_token():
    return current_app.config.get('TELEGRAM_BOT_TOKEN') or ''


def is_configured():
    return bool(get_bot_token())


async def send_telegram_message_async(chat_id, message, bot_token):
    bot = Bot(token=bot_token)
    async with bot:
        return await bot.send_message(
            chat_id=chat_id,
            text=message,
            parse_mode=ParseMode.MARKDOWN
        )


def send_message(to, body):
    """Send ``body`` to the Telegram chat ``to``.

    Returns ``{'id': <message id>, 'status': <delivery status>}``. Raises
    ProviderError when no bot token is configured or Telegram rejects the call.
    """
    bot_token = get_bot_token()
    if not bot_token:
        raise ProviderError('Messaging provider not configured')

    try:
        result = asyncio.run(send_telegram_message_async(to, body, bot_token))
    except TelegramError as e:
        logger.error(f"Error sending Telegram message to {to}: {e}")
        raise ProviderError(f'Failed to send message: {e}')

    return {'id': str(result.message_id), 'status': DELIVERY_STATUS_SENT}
