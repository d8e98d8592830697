"""Notification transports for the infrastructure layer."""

from .email_sender import EmailNotificationSender, render_new_listing_email

__all__ = ["EmailNotificationSender", "render_new_listing_email"]
