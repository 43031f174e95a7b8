from fastapi_mail import ConnectionConfig, FastMail, MessageSchema
from starlette.concurrency import run_in_threadpool
from twilio.rest import Client

from salon_backend.config import Settings
from salon_backend.logger import logger
from salon_backend.schemas import Booking
from salon_backend.services import get_service_name


def render_booking_email(booking: Booking, service_name: str) -> str:
    return f"""
    <html>
    <body>
        <h2>Hi {booking.full_name},</h2>
        <p>Thank you for your booking request for <b>{service_name}</b>
        on <b>{booking.date}</b> at <b>{booking.time}</b>.</p>
        <p>We will get in touch via {booking.contact_detail} to confirm your appointment.</p>
        <hr>
        <p>See you soon!</p>
    </body>
    </html>
    """


def render_admin_email(booking: Booking, service_name: str) -> str:
    return f"""
    <html>
    <body>
        <h2>New booking</h2>
        <p>Service: {service_name}</p>
        <p>Name: {booking.full_name}</p>
        <p>Contact: {booking.contact_detail}</p>
        <p>Email: {booking.client_email}</p>
        <p>Date & time: {booking.date} {booking.time}</p>
        <p>Notes: {booking.notes or "–"}</p>
    </body>
    </html>
    """


class BookingNotifier:
    """
    Tells the client and the studio about a stored booking.

    Runs after the booking is persisted. Every channel catches and logs its own
    failures, so nothing here can undo or delay a booking.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.mail = None
        if settings.mail_enabled:
            conf = ConnectionConfig(
                MAIL_USERNAME=settings.MAIL_USERNAME,
                MAIL_PASSWORD=settings.MAIL_PASSWORD,
                MAIL_FROM=settings.MAIL_FROM,
                MAIL_PORT=settings.MAIL_PORT,
                MAIL_SERVER=settings.MAIL_SERVER,
                MAIL_STARTTLS=True,
                MAIL_SSL_TLS=False,
                USE_CREDENTIALS=True,
            )
            self.mail = FastMail(conf)

    async def notify(self, booking: Booking):
        service_name = get_service_name(booking.service)

        if self.mail is not None:
            await self._send_email(
                subject="Your booking request",
                recipient=booking.client_email,
                body=render_booking_email(booking, service_name),
            )
            admin_email = self.settings.ADMIN_EMAIL or self.settings.MAIL_USERNAME
            await self._send_email(
                subject="New booking received",
                recipient=admin_email,
                body=render_admin_email(booking, service_name),
            )

        if self.settings.whatsapp_enabled:
            text = (f"New booking: {service_name} on {booking.date} at {booking.time} "
                    f"for {booking.full_name} ({booking.contact_detail})")
            await run_in_threadpool(self._send_whatsapp, text)

    async def _send_email(self, subject: str, recipient: str, body: str):
        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=body,
            subtype="html"
        )
        try:
            await self.mail.send_message(message)
            logger.info(f"Email '{subject}' sent to {recipient}")
        except Exception as e:
            logger.error(f"Failed to send email '{subject}' to {recipient}: {e}")

    def _send_whatsapp(self, text: str):
        try:
            client = Client(self.settings.TWILIO_SID, self.settings.TWILIO_AUTH_TOKEN)
            client.messages.create(
                body=text,
                from_=f"whatsapp:{self.settings.TWILIO_WHATSAPP_FROM}",
                to=f"whatsapp:{self.settings.ADMIN_WHATSAPP_TO}"
            )
            logger.info("WhatsApp notification sent")
        except Exception as e:
            logger.error(f"Failed to send WhatsApp notification: {e}")
