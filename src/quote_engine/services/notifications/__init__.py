"""Customer notification services."""

from .email import EmailMessage, EmailNotConfiguredError, HttpEmailNotifier, render_quote_email

__all__ = [
    "EmailMessage",
    "EmailNotConfiguredError",
    "HttpEmailNotifier",
    "render_quote_email",
]
