"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""

from pocketkit.core.interfaces.middleware import CallNext, Middleware
from pocketkit.core.interfaces.storage import CredentialStore

__all__ = ["CallNext", "CredentialStore", "Middleware"]
