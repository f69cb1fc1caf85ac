"""
Email Service

Envío de correos por SMTP con aiosmtplib (adjuntos PDF incluidos).
"""

import logging
from typing import Optional, Dict, Any, List
import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication

from app.config.settings import settings

logger = logging.getLogger(__name__)


class EmailServiceConfig:
    """Configuración SMTP tomada de settings"""

    def __init__(self):
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_username = settings.smtp_username
        self.smtp_password = settings.smtp_password
        self.smtp_use_tls = settings.smtp_use_tls
        self.smtp_start_tls = settings.smtp_start_tls
        self.from_email = settings.email_from or settings.smtp_username

    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.from_email)

    def validate(self) -> List[str]:
        errors = []
        if not self.smtp_host:
            errors.append("SMTP_HOST is required")
        if not self.smtp_port or self.smtp_port <= 0:
            errors.append("SMTP_PORT must be a positive integer")
        if not self.from_email:
            errors.append("EMAIL_FROM is required")
        if self.smtp_use_tls and self.smtp_start_tls:
            errors.append("Cannot use both implicit TLS and STARTTLS")
        return errors


class EmailService:
    """Servicio de envío de correos vía SMTP"""

    def __init__(self, config: Optional[EmailServiceConfig] = None):
        self.config = config or EmailServiceConfig()

    async def send_email(
        self,
        to_email: str,
        subject: str,
        text_content: str,
        attachments: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Enviar un correo de texto plano con adjuntos opcionales.

        Args:
            to_email: Destinatario
            subject: Asunto
            text_content: Cuerpo del mensaje
            attachments: Lista de {'filename', 'content' (bytes), 'subtype'}

        Returns:
            Dict con 'success' y, si falla, 'error'
        """
        if not self.config.is_configured():
            return {
                'success': False,
                'error': 'Email service not configured'
            }

        try:
            message = MIMEMultipart()
            message['From'] = self.config.from_email
            message['To'] = to_email
            message['Subject'] = subject
            message.attach(MIMEText(text_content, 'plain', 'utf-8'))

            for attachment in attachments or []:
                part = MIMEApplication(attachment['content'], _subtype=attachment.get('subtype', 'pdf'))
                part.add_header('Content-Disposition', 'attachment', filename=attachment['filename'])
                message.attach(part)

            result = await self._send_via_smtp(message)

            logger.info(f"Email sent successfully to {to_email}: {subject}")
            return result

        except Exception as e:
            error_msg = f"Failed to send email to {to_email}: {str(e)}"
            logger.error(error_msg, exc_info=True)
            return {
                'success': False,
                'error': error_msg
            }

    async def _send_via_smtp(self, message: MIMEMultipart) -> Dict[str, Any]:
        smtp_kwargs = {
            'hostname': self.config.smtp_host,
            'port': self.config.smtp_port,
            'use_tls': self.config.smtp_use_tls,
            'start_tls': self.config.smtp_start_tls and not self.config.smtp_use_tls,
        }

        async with aiosmtplib.SMTP(**smtp_kwargs) as smtp:
            if self.config.smtp_username and self.config.smtp_password:
                await smtp.login(self.config.smtp_username, self.config.smtp_password)

            result = await smtp.send_message(message)

            return {
                'success': True,
                'smtp_result': result
            }
