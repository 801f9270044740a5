"""API: camada de borda HTTP.

Responsabilidades:
- Receber requests e validar campos obrigatórios
- Delegar ao registro de sessões e ao motor de webhooks
- Mapear erros do core para respostas HTTP

NÃO PODE conter: máquina de estados, fila de retry, regras de sessão.
"""
