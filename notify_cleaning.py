#!/usr/bin/env python3
"""
Send the cleaning digests to the team's Telegram chat.

Reads every equipment record, groups those due tomorrow (warning) and
overdue, and posts one Markdown message per non-empty group. Intended to
run from cron once a day.

Usage:
    python notify_cleaning.py             # send
    python notify_cleaning.py --dry-run   # print the messages only
"""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from checklist import create_app
from checklist.buisness.notifications.cleaning_digest import CleaningDigest
from checklist.buisness.notifications.telegram_client import TelegramClient, TelegramError
from checklist.logger import get_logger
from checklist.services.equipment.equipment_service import EquipmentService
from checklist.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("checklist.notify")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Send cleaning reminders to Telegram')
    parser.add_argument('--dry-run', action='store_true',
                        help='Print the messages instead of sending them')
    return parser.parse_args()


def main():
    args = parse_arguments()
    app = create_app()

    with app.app_context():
        digest = CleaningDigest.collect(EquipmentService.all_equipment())
        messages = digest.messages()
        logger.info(f"Cleaning digest: {len(digest.warning)} warning, {len(digest.overdue)} overdue")

        if not messages:
            logger.info("Nothing to notify")
            return 0

        if args.dry_run:
            for message in messages:
                print(message)
                print()
            return 0

        try:
            client = TelegramClient(
                app.config.get('TELEGRAM_BOT_TOKEN') or os.environ.get('TELEGRAM_BOT_TOKEN'),
                app.config.get('TELEGRAM_CHAT_ID') or os.environ.get('TELEGRAM_CHAT_ID'),
            )
        except ValueError as e:
            logger.error(str(e))
            return 1

        try:
            for message in messages:
                client.send_message(message)
        except TelegramError as e:
            logger.error(f"Notification run aborted: {sanitize_exception_message(e)}")
            return 1

        logger.info(f"Sent {len(messages)} notification(s)")
        return 0


if __name__ == '__main__':
    sys.exit(main())
