"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce la cadena de middlewares ni la CLI: solo conceptos del
  backend (colecciones, registros, credenciales).
"""
