"""Rotas HTTP da API: fachada fina sobre o core.

Estrutura:
- routes/health/: liveness
- routes/sessions/: QR, status, envio e consultas por sessão
- routes/webhooks/: gerenciamento de assinaturas
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
