"""Adaptadores concretos: transporte httpx, firma JWT y estrategias OAuth 2.0."""
