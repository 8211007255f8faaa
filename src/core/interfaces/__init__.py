"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el orquestador depende de abstracciones,
  no del binario `docker` ni de httpx (que solo importan `adapters/` y `cli/`).
"""
