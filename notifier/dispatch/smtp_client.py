"""SMTP mail transport.

A thin wrapper around smtplib with support for TLS/SSL, authentication and
proper connection lifecycle management. One connection is opened per message.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from notifier.config.environment import EnvironmentConfig
from notifier.config.models import EmailConfig

from .exceptions import InvalidRecipientError, SMTPDeliveryError

logger = logging.getLogger(__name__)


class SMTPClient:
    """Sends email messages through an SMTP relay.

    Designed to be easily mockable for testing: the smtplib classes are
    injected through factories.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: int = 30,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client.

        Args:
            host: SMTP server hostname
            port: SMTP server port; 465 selects implicit TLS
            user: Login user (optional)
            password: Login password (optional)
            use_tls: Upgrade plain connections with STARTTLS
            timeout: Socket timeout in seconds
            smtp_factory: Factory function for creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory function for creating SMTP_SSL instances (for mocking)
        """
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    @classmethod
    def from_environment(
        cls, env_config: EnvironmentConfig, email_config: EmailConfig
    ) -> "SMTPClient":
        """Build a client from environment and email settings.

        SMTP_TIMEOUT, when set, overrides ``email.timeout``.
        """
        return cls(
            host=env_config.smtp_host,
            port=env_config.smtp_port,
            user=env_config.smtp_user,
            password=env_config.smtp_pass,
            use_tls=email_config.use_tls,
            timeout=env_config.smtp_timeout or email_config.timeout,
        )

    def send(self, message: EmailMessage) -> str:
        """Send an email message via SMTP.

        A Message-ID is generated when the message has none.

        Args:
            message: Fully constructed EmailMessage to send

        Returns:
            The Message-ID of the sent message

        Raises:
            InvalidRecipientError: If the relay refuses all recipients
            SMTPDeliveryError: If message delivery fails otherwise
        """
        if not message["Message-ID"]:
            message["Message-ID"] = make_msgid()
        message_id = message["Message-ID"]

        smtp = None
        try:
            if self.port == 465:
                logger.debug(f"Connecting to {self.host}:{self.port} with implicit TLS")
                context = ssl.create_default_context()
                smtp = self.smtp_ssl_factory(
                    self.host, self.port, timeout=self.timeout, context=context
                )
            else:
                logger.debug(f"Connecting to {self.host}:{self.port}")
                smtp = self.smtp_factory(self.host, self.port, timeout=self.timeout)

                if self.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    context = ssl.create_default_context()
                    smtp.starttls(context=context)

            if self.user and self.password:
                logger.debug(f"Authenticating as {self.user}")
                smtp.login(self.user, self.password)
            else:
                logger.debug("No authentication credentials provided, proceeding without auth")

            refused = smtp.send_message(message)
            if refused:
                logger.warning(
                    f"Relay refused {len(refused)} recipient(s) of {message_id}",
                    extra={
                        "event": "dispatch.smtp.partially_refused",
                        "refused": sorted(refused),
                    },
                )
            logger.debug(f"Message {message_id} sent successfully to {message['To']}")
            return message_id

        except smtplib.SMTPRecipientsRefused as e:
            error_msg = f"SMTP relay refused recipients: {', '.join(sorted(e.recipients))}"
            logger.error(error_msg)
            raise InvalidRecipientError(error_msg, refused=e.recipients) from e
        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")
