"""Interfaces/abstracciones del Core.

- Define contratos (Protocol) que implementan adaptadores concretos.
- El Core depende de `Transport` y `CredentialStrategy`, no de httpx ni de
  criptografía.
"""
