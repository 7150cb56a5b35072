import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from boutique import config
from boutique.errors import NotificationError

logger = logging.getLogger(__name__)


class Mailer:
    """
    Envoi SMTP minimal (relais configuré dans .env).
    - STARTTLS si EMAIL_USE_TLS, login si EMAIL_USER/EMAIL_PASS
    - timeout borné; toute erreur devient NotificationError
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: int = 10,
        from_name: str = "Boutique",
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_name = from_name

    @classmethod
    def from_config(cls) -> "Mailer":
        return cls(
            host=config.EMAIL_HOST,
            port=config.EMAIL_PORT,
            user=config.EMAIL_USER,
            password=config.EMAIL_PASS,
            use_tls=config.EMAIL_USE_TLS,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
            from_name=config.EMAIL_FROM_NAME,
        )

    def send(self, to: str, subject: str, html: str) -> None:
        if not self.host:
            raise NotificationError("EMAIL_HOST non configuré")
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.user or "noreply@localhost"))
        msg["To"] = to
        msg.set_content("Ce message nécessite un client email compatible HTML.")
        msg.add_alternative(html, subtype="html")
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as s:
                if self.use_tls:
                    s.starttls()
                if self.user and self.password:
                    s.login(self.user, self.password)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP: {e}") from e
        logger.info("mail sent to=%s subject=%s", to, subject)
