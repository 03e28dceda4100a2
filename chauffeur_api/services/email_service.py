from datetime import date, datetime
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from chauffeur_api.core.config import PACKAGE_DIR
from chauffeur_api.core.logger import get_logger
from chauffeur_api.models.email_message import ComposedMessage, DeliveryReceipt
from chauffeur_api.models.inquiry_request import ValidatedInquiry
from chauffeur_api.models.vehicle import Vehicle

logger = get_logger(__name__)

COMPANY_NAME = "Presidential Chauffeurs"

# User text is escaped in the HTML body only; the text twin is sent as-is.
template_env = Environment(
    loader=FileSystemLoader(PACKAGE_DIR / "templates"),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def format_long_date(value: date) -> str:
    """Monday, October 20, 2026"""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def compose_inquiry_email(
    inquiry: ValidatedInquiry,
    vehicle: Vehicle,
    now: datetime,
    company_name: str = COMPANY_NAME,
) -> ComposedMessage:
    context = {
        "company_name": company_name,
        "vehicle": vehicle,
        "purpose": inquiry.purpose,
        "formatted_date": format_long_date(inquiry.requested_date),
        "email": inquiry.email,
        "description": (inquiry.description or "").strip(),
        "reply_subject": f"Re: Inquiry about {vehicle.name} Chauffeur Service",
        "reply_body": (
            f"Thank you for your inquiry about our {vehicle.name} service. "
            "We're pleased to provide you with more information."
        ),
        "year": now.year,
    }
    # Header values cannot carry line breaks; the bodies keep the text as typed
    subject_purpose = " ".join(inquiry.purpose.split())
    return ComposedMessage(
        subject=f"New Inquiry: {vehicle.name} - {subject_purpose}",
        html_body=template_env.get_template("inquiry_email.html").render(context),
        text_body=template_env.get_template("inquiry_email.txt").render(context),
        reply_to=inquiry.email,
    )


class SmtpMailSender:
    """Delivers composed inquiries to the operator mailbox over SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        recipient: str,
        sender_name: str = COMPANY_NAME,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.recipient = recipient
        self.sender_name = sender_name
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password and self.recipient)

    def build_message(self, message: ComposedMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self.sender_name, self.username))
        msg["To"] = self.recipient
        msg["Reply-To"] = message.reply_to
        msg["Subject"] = message.subject
        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = make_msgid(domain=self.username.rpartition("@")[2] or None)
        msg.set_content(message.text_body)
        msg.add_alternative(message.html_body, subtype="html")
        return msg

    def _connection_options(self) -> dict:
        # Implicit TLS on 465, STARTTLS on 587
        return {
            "hostname": self.host,
            "port": self.port,
            "timeout": self.timeout,
            "use_tls": self.port == 465,
            "start_tls": True if self.port == 587 else None,
        }

    async def send(self, message: ComposedMessage) -> DeliveryReceipt:
        if not self.enabled:
            logger.warning("Email credentials not configured; skipping send")
            return DeliveryReceipt(sent=False, error="Email transport not configured")

        msg = self.build_message(message)
        try:
            await aiosmtplib.send(
                msg,
                username=self.username,
                password=self.password,
                **self._connection_options(),
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}")
            return DeliveryReceipt.failed(e)

        logger.info(f"Email sent successfully messageId={msg['Message-ID']}")
        return DeliveryReceipt(sent=True, message_id=msg["Message-ID"])

    async def verify_connection(self) -> bool:
        if not self.enabled:
            logger.warning("Email credentials not found, email functionality disabled")
            return False

        smtp = aiosmtplib.SMTP(**self._connection_options())
        try:
            await smtp.connect()
            await smtp.login(self.username, self.password)
            await smtp.quit()
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Email service configuration error: {e}")
            return False

        logger.info("Email service is ready to send messages")
        return True
