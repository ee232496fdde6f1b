"""Mail transport for candidate notifications.

SMTPClient opens one connection per message: implicit TLS on port 465,
otherwise plain SMTP upgraded with STARTTLS when TLS is enabled.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email

from jobmatch.config.environment import EnvironmentConfig

from .models import SMTPDeliveryError

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Delivers a single EmailMessage per call.

    The smtplib classes are injectable so tests never open a socket.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(
        self,
        message: EmailMessage,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
    ) -> None:
        """Connect, authenticate if credentials are configured, and send.

        Raises:
            SMTPDeliveryError: If connecting, authenticating or sending fails
        """
        connection = None
        try:
            connection = self._open(env_config, use_tls)
            if env_config.smtp_user and env_config.smtp_pass:
                connection.login(env_config.smtp_user, env_config.smtp_pass)
            connection.send_message(message)
        except smtplib.SMTPException as e:
            logger.error(f"SMTP server rejected message to {message['To']}: {e}")
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            logger.error(f"Could not reach {env_config.smtp_host}:{env_config.smtp_port}: {e}")
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if connection is not None:
                _close_quietly(connection)

        logger.debug(f"Delivered message to {message['To']}")

    def _open(self, env_config: EnvironmentConfig, use_tls: bool):
        host, port = env_config.smtp_host, env_config.smtp_port
        if port == IMPLICIT_TLS_PORT:
            logger.debug(f"Opening implicit TLS connection to {host}:{port}")
            return self.smtp_ssl_factory(host, port, context=ssl.create_default_context())

        logger.debug(f"Opening SMTP connection to {host}:{port}")
        connection = self.smtp_factory(host, port)
        if use_tls:
            connection.starttls(context=ssl.create_default_context())
        return connection


def _close_quietly(connection) -> None:
    try:
        connection.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.warning(f"Error closing SMTP connection: {e}")


def normalize_recipient(address: str) -> str:
    """Validate a single recipient address and return its normalized form.

    Raises:
        ValueError: If the address is not a valid email
    """
    try:
        return validate_email(address.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid recipient email address: '{address}' - {e}") from e


def build_sender_address(env_config: EnvironmentConfig) -> str:
    """Format the From header, e.g. "Job Match <jobs@example.com>".

    The address is SMTP_SENDER_EMAIL, else SMTP_USER, else noreply@SMTP_HOST.
    """
    address = (
        env_config.smtp_sender_email
        or env_config.smtp_user
        or f"noreply@{env_config.smtp_host}"
    )
    return f"{env_config.smtp_sender_name} <{address}>"
