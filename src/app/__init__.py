"""App, coração do sistema: sessões, eventos, webhooks e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: fluxos end-to-end (evento de sessão → webhook)
- events/: barramento de eventos in-process
- sessions/: registro de sessões e modelos
- webhooks/: assinaturas, entrega e fila de retry
- infra/: implementações concretas de IO (HTTP, adapter em memória)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; fsm governa.
"""
