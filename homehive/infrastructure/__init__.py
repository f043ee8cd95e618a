"""
Capa de Infraestructura - Motor de reservas.

Implementaciones concretas de los puertos (interfaces).

Estructura:
- db/: Tablas, motor y repositorios SQL (SQLAlchemy async)
- gateways/: Adaptador de Stripe
- in_memory/: Implementaciones in-memory para testing y modo local
- services/: Política de acceso
- circuit_breaker.py: Circuit breaker de Stripe (pybreaker)
"""
