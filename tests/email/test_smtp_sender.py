import pytest
from unittest.mock import MagicMock, patch

from opsflow.email.config import EmailSettings
from opsflow.email.exceptions import EmailConfigurationException
from opsflow.email.smtp_sender import SmtpEmailSender


@pytest.fixture
def mock_settings():
    """Fixture pour les paramètres de test."""
    return EmailSettings(
        SMTP_HOST="smtp.test.com",
        SMTP_PORT=587,
        SENDER_EMAIL="devis@opsflow.test",
        SENDER_PASSWORD="test_password",
        USE_TLS=True,
    )


def test_smtp_sender_initialization_missing_config():
    """L'initialisation échoue si la configuration est incomplète."""
    with pytest.raises(EmailConfigurationException):
        SmtpEmailSender(settings=EmailSettings(SMTP_HOST="", SENDER_EMAIL=None, SENDER_PASSWORD=None))


@pytest.mark.asyncio
async def test_send_email_success(mock_settings):
    sender = SmtpEmailSender(settings=mock_settings)
    with patch("opsflow.email.smtp_sender.smtplib.SMTP") as mock_smtp:
        server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = server

        result = await sender.send_email(
            recipient_email="client@example.com",
            subject="Votre facture",
            html_content="<p>Bonjour</p>",
            attachments=[{"filename": "invoice-INV-1-00001.pdf", "content": b"%PDF", "subtype": "pdf"}],
        )

    assert result is True
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("devis@opsflow.test", "test_password")
    assert server.sendmail.call_args.args[:2] == ("devis@opsflow.test", ["client@example.com"])
