# main.py
import asyncio
import logging
import sys

from unihub.config import LOG_LEVEL
from unihub.models.conversation import Sender
from unihub.services.portal import PortalServices, build_services

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


def print_notifications(services: PortalServices):
    bus = services.notifications
    print(f"{bus.unread_count} unread notification(s)")
    for notification in bus.notifications:
        marker = " " if notification.read else "*"
        print(f" {marker} [{notification.type.value}] {notification.title}: {notification.message}")


async def chat(services: PortalServices):
    session = services.open_session()
    print(session.transcript[0].text)

    while True:
        try:
            text = await asyncio.to_thread(input, "\n> ")
        except EOFError:
            break
        command = text.strip().lower()
        if command in ("/quit", "/exit"):
            break
        if command == "/notifications":
            print_notifications(services)
            continue
        if command == "/read-all":
            services.notifications.mark_all_as_read()
            print_notifications(services)
            continue

        seen = len(session.transcript)
        await session.submit(text)
        for turn in session.transcript[seen:]:
            if turn.sender is Sender.ASSISTANT:
                print(f"\n{turn.text}")


def main():
    """Run the console assistant"""
    try:
        services = build_services()
        asyncio.run(chat(services))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Error running assistant: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
