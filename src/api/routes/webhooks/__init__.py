"""Endpoints de gerenciamento de webhooks."""
