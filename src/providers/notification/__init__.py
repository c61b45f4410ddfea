"""Outbound notification adapters."""

from src.providers.notification.webhook_notifier import HttpWebhookNotifier

__all__ = ["HttpWebhookNotifier"]
