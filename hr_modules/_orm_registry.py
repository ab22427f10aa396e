"""
Module ORM Registry (``hr_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table definition before tables are
created.  ``hr_kernel.db.engine.create_tables()`` calls
``import_all_orm_models()`` first.

Architecture position
---------------------
**Modules layer** -- utility.  MUST NOT be imported at module level by
``hr_kernel``.
"""


def import_all_orm_models() -> None:
    """Import every ``hr_modules.*.orm`` module to register ORM models.

    Employees first: every other table references ``hr_employees.id``.
    This function is idempotent -- repeated calls are harmless.
    """
    # fmt: off
    import hr_modules.payroll.orm  # noqa: F401
    import hr_modules.attendance.orm  # noqa: F401
    import hr_modules.performance.orm  # noqa: F401
    # fmt: on
