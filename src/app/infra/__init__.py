"""Infra: implementações concretas de IO (HTTP de saída, adapters de mensageria)."""
