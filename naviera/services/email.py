"""
Reporte de errores por email (SMTP).
Se usa desde el handler global de excepciones de la API.
"""

import os
import smtplib
import logging
import traceback
from html import escape
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from datetime import datetime

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes"}


class EmailService:
    """Envío de reportes de error vía SMTP"""

    def __init__(self):
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_pass = os.getenv("SMTP_PASS")
        self.smtp_use_tls = os.getenv("SMTP_USE_TLS", "true").lower() in TRUE_VALUES
        self.enabled = os.getenv("ENABLE_ERROR_EMAILS", "false").lower() in TRUE_VALUES
        self.environment = os.getenv("ENV", "development")
        self.from_addr = os.getenv("ERROR_FROM", "errores@naviera.local")
        self.to_addrs = [
            addr.strip()
            for addr in os.getenv("ERROR_TO", "").split(",")
            if addr.strip()
        ]

    def is_configured(self) -> bool:
        return bool(
            self.smtp_host and self.smtp_user and self.smtp_pass and self.to_addrs
        )

    def should_send(self) -> bool:
        return self.enabled and self.is_configured()

    def send_error_email(self, error_data: dict) -> bool:
        """
        Envía el reporte de un error no controlado.

        Args:
            error_data: path, method, client, user, exception, timestamp
        """
        if not self.should_send():
            logger.debug("Reporte de errores por email deshabilitado")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"[Naviera][{self.environment}] ERROR en {error_data.get('path')}"
        msg["From"] = self.from_addr
        msg["To"] = ", ".join(self.to_addrs)
        msg.attach(MIMEText(self._build_html(error_data), "html", "utf-8"))

        try:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10)
            if self.smtp_use_tls:
                server.starttls()
            server.login(self.smtp_user, self.smtp_pass)
            server.send_message(msg)
            server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"No se pudo enviar el email de error: {e}")
            return False

        logger.info(f"Email de error enviado a {', '.join(self.to_addrs)}")
        return True

    def _build_html(self, error_data: dict) -> str:
        exception = error_data.get("exception")
        if exception is not None:
            trace = "".join(
                traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                )
            )
        else:
            trace = "Sin traceback"

        timestamp = error_data.get(
            "timestamp", datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")
        )
        rows = [
            ("Endpoint", f"{error_data.get('method', '?')} {error_data.get('path', '?')}"),
            ("Usuario", error_data.get("user", "Anónimo")),
            ("IP cliente", error_data.get("client", "desconocida")),
            ("Entorno", self.environment.upper()),
            ("Fecha", timestamp),
        ]
        rows_html = "".join(
            f"<tr><td><b>{escape(label)}</b></td><td>{escape(str(value))}</td></tr>"
            for label, value in rows
        )

        return f"""
        <html>
        <body style="font-family: sans-serif;">
            <h2 style="color: #c82333;">Error no controlado en Naviera API</h2>
            <table cellpadding="6">{rows_html}</table>
            <h3>Traceback</h3>
            <pre style="background: #1e1e1e; color: #d4d4d4; padding: 12px;">{escape(trace)}</pre>
        </body>
        </html>
        """


# Instancia global
email_service = EmailService()
