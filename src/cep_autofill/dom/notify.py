"""Transient confirmation banner appended to the page body."""

import asyncio
import logging

from cep_autofill.dom.page import Window

logger = logging.getLogger(__name__)

ALERT_ID = "cep-autofill-alert"

ALERT_STYLE = (
    "position: fixed; top: 50%; left: 50%; transform: translate(-50%, -50%); "
    "padding: 20px; background: linear-gradient(120deg, #007BFF, #00D4BF); "
    "border-radius: 8px; border: 1px solid #ccc; box-shadow: 0 4px 8px rgba(0, 0, 0, 0.2); "
    "z-index: 2147483647; font-family: Arial, sans-serif; font-size: 16px; "
    "color: #ffffff; text-align: center;"
)


class DomNotifier:
    """Show a short-lived banner; removal is scheduled on the running loop."""

    def __call__(self, window: Window, text: str, duration: float) -> None:
        document = window.document
        existing = document.soup.find(id=ALERT_ID)
        if existing is not None:
            existing.decompose()

        alert = document.soup.new_tag("div", id=ALERT_ID, style=ALERT_STYLE)
        paragraph = document.soup.new_tag("p")
        paragraph.string = text
        alert.append(paragraph)
        document.body.append(alert)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; banner stays until the next notification")
            return
        loop.call_later(duration, self._dismiss, alert)

    @staticmethod
    def _dismiss(alert) -> None:
        if alert.parent is not None:
            alert.decompose()
