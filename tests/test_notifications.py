import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from salon_backend.config import Settings
from salon_backend.notifications import BookingNotifier, render_admin_email, render_booking_email
from salon_backend.schemas import Booking

BOOKING = Booking(
    id=1,
    full_name="Ana",
    client_email="ana@example.com",
    contact_detail="+1 555 0100",
    service="gel",
    date="2025-06-01",
    time="11:00",
    notes="",
    created_at="2025-01-01T10:00:00.000+00:00",
)


def mail_settings(**extra):
    return Settings(
        _env_file=None,
        MAIL_USERNAME="studio@example.com",
        MAIL_PASSWORD="secret",
        MAIL_FROM="studio@example.com",
        **extra
    )


def test_templates_mention_booking():
    client_body = render_booking_email(BOOKING, "Gel Manicure")
    assert "Ana" in client_body and "2025-06-01" in client_body and "11:00" in client_body

    admin_body = render_admin_email(BOOKING, "Gel Manicure")
    assert "ana@example.com" in admin_body and "Gel Manicure" in admin_body


def test_nothing_configured_sends_nothing():
    notifier = BookingNotifier(Settings(_env_file=None))
    assert notifier.mail is None
    with patch("salon_backend.notifications.Client") as twilio:
        asyncio.run(notifier.notify(BOOKING))
    twilio.assert_not_called()


def test_emails_sent_to_client_and_admin():
    notifier = BookingNotifier(mail_settings(ADMIN_EMAIL="owner@example.com"))
    with patch("salon_backend.notifications.FastMail.send_message", new_callable=AsyncMock) as send:
        asyncio.run(notifier.notify(BOOKING))

    recipients = [call.args[0].recipients[0] for call in send.call_args_list]
    assert [getattr(r, "email", r) for r in recipients] == ["ana@example.com", "owner@example.com"]


def test_email_failure_is_swallowed():
    notifier = BookingNotifier(mail_settings())
    with patch("salon_backend.notifications.FastMail.send_message",
               new_callable=AsyncMock, side_effect=ConnectionError("smtp down")) as send:
        asyncio.run(notifier.notify(BOOKING))
    assert send.call_count == 2


def test_whatsapp_sent_when_configured():
    settings = Settings(
        _env_file=None,
        TWILIO_SID="AC123",
        TWILIO_AUTH_TOKEN="token",
        TWILIO_WHATSAPP_FROM="+15550001",
        ADMIN_WHATSAPP_TO="+15550002",
    )
    with patch("salon_backend.notifications.Client") as twilio:
        twilio.return_value.messages.create = MagicMock(side_effect=RuntimeError("twilio down"))
        asyncio.run(BookingNotifier(settings).notify(BOOKING))

    twilio.assert_called_once_with("AC123", "token")
    kwargs = twilio.return_value.messages.create.call_args.kwargs
    assert kwargs["to"] == "whatsapp:+15550002"
    assert "2025-06-01" in kwargs["body"]
