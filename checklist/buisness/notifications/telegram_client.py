"""
Telegram Bot API client
Posts the cleaning digests to a chat through sendMessage
"""

from typing import Any, Dict, Optional

import requests

from checklist.logger import get_logger

logger = get_logger("checklist.buisness.notifications.telegram")

API_BASE_URL = "https://api.telegram.org"


class TelegramError(RuntimeError):
    """The Bot API refused or failed to deliver a message."""


class TelegramClient:
    def __init__(self, bot_token: str, chat_id: str, base_url: str = API_BASE_URL, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        if not bot_token or not chat_id:
            raise ValueError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID are required")
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.bot_token}/{method}"

    def send_message(self, text: str, parse_mode: str = "Markdown") -> Dict[str, Any]:
        """
        Send one message to the configured chat.

        Returns:
            The `result` object of the Bot API response

        Raises:
            TelegramError: transport failure, HTTP error or ok=false reply
        """
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": parse_mode}
        try:
            response = self.session.post(self._method_url("sendMessage"), json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            # The URL carries the bot token; keep it out of the log
            logger.error(f"Telegram sendMessage failed: {type(e).__name__}")
            raise TelegramError(f"Telegram sendMessage failed: {type(e).__name__}") from e

        if not data.get('ok'):
            description = data.get('description', 'unknown error')
            logger.error(f"Telegram rejected message: {description}")
            raise TelegramError(f"Telegram rejected message: {description}")

        logger.info(f"Telegram message delivered to chat {self.chat_id}")
        return data.get('result', {})
