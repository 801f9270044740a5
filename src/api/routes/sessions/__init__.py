"""Endpoints de sessões de mensageria (QR, status, envio, consultas)."""
