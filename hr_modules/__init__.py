"""
hr_modules -- persistence and orchestration around the pure engines.

Each subpackage pairs frozen DTOs (``models.py``) with SQLAlchemy
persistence (``orm.py``) and a service facade (``service.py``) that owns
the transaction boundary.
"""
