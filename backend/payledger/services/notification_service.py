"""
Notification Service — Payment confirmation emails.

Consumes PaymentSucceeded events off the event bus. Runs outside the
request path; failures are logged by the bus and never touch the ledger.
"""
import smtplib
from html import escape
from datetime import datetime
from email.message import EmailMessage
from typing import Callable, Optional

from payledger.config import Settings
from payledger.schemas.schemas import PaymentRecord
from payledger.services.events import EventBus, PaymentSucceeded
from payledger.utils.logger import get_logger

logger = get_logger(__name__)


def format_amount(amount: float, currency: str = "INR") -> str:
    symbol = "₹" if currency == "INR" else f"{currency} "
    return f"{symbol}{amount:,.2f}"


class NotificationService:
    def __init__(self, settings: Settings, smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None):
        self.settings = settings
        self._smtp_factory = smtp_factory or smtplib.SMTP_SSL

    def register(self, bus: EventBus) -> None:
        bus.subscribe(PaymentSucceeded, self.on_payment_succeeded)

    def compose_payment_email(self, record: PaymentRecord) -> EmailMessage:
        name = record.user_name or "there"
        amount = format_amount(record.amount, record.currency)

        message = EmailMessage()
        message["Subject"] = f"Payment Successful – {record.plan_name} ({amount})"
        message["From"] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.EMAIL_USER}>"
        message["To"] = record.user_email
        message.set_content(
            f"Hi {name},\n\n"
            f"Thank you for your purchase! Your payment for {record.plan_name} has been verified successfully.\n\n"
            f"Amount: {amount}\n"
            f"Order ID: {record.gateway_order_id}\n"
            f"Payment ID: {record.gateway_payment_id}\n"
            f"Access: {record.plan_duration}\n\n"
            f"You now have access to premium content.\n\n"
            f"With gratitude,\n{self.settings.EMAIL_FROM_NAME}"
        )
        safe = {key: escape(str(value)) for key, value in {
            "name": name, "plan": record.plan_name, "order": record.gateway_order_id,
            "payment": record.gateway_payment_id, "duration": record.plan_duration,
        }.items()}
        message.add_alternative(
            f"<div style=\"font-family:Segoe UI, Roboto, Helvetica, Arial, sans-serif;\">"
            f"<h2>Payment Successful</h2>"
            f"<p>Hi {safe['name']}, thank you for your purchase!</p>"
            f"<div>Plan: <strong>{safe['plan']}</strong></div>"
            f"<div>Amount: <strong>{amount}</strong></div>"
            f"<div>Order ID: <code>{safe['order']}</code></div>"
            f"<div>Payment ID: <code>{safe['payment']}</code></div>"
            f"<div>Access: <strong>{safe['duration']}</strong></div>"
            f"<p>You now have access to premium content.</p>"
            f"<p style=\"color:#94a3b8; font-size:12px;\">© {datetime.now().year} {self.settings.EMAIL_FROM_NAME}</p>"
            f"</div>",
            subtype="html",
        )
        return message

    def send_email(self, message: EmailMessage) -> bool:
        if not self.settings.mailer_configured:
            logger.info(f"[EMAIL] Mailer not configured, skipping mail to {message['To']}")
            return False

        # Gmail app passwords are often pasted with spaces
        password = "".join(self.settings.EMAIL_PASS.split())
        with self._smtp_factory(self.settings.SMTP_HOST, self.settings.SMTP_PORT) as smtp:
            smtp.login(self.settings.EMAIL_USER, password)
            smtp.send_message(message)
        logger.info(f"[EMAIL] Sent '{message['Subject']}' to {message['To']}")
        return True

    def on_payment_succeeded(self, event: PaymentSucceeded) -> None:
        record = event.record
        if not record.user_email:
            logger.info(f"[EMAIL] No email on payment {record.id}, confirmation skipped")
            return
        self.send_email(self.compose_payment_email(record))
