"""
Payroll ORM Persistence Models (``hr_modules.payroll.orm``).

Responsibility:
    SQLAlchemy ORM models that persist the frozen dataclass DTOs defined in
    ``hr_modules.payroll.models``.  Each ORM class mirrors a DTO and
    provides ``to_dto()`` / ``from_dto()`` conversion.

Architecture position:
    **Modules layer** -- persistence companions to the pure DTO models.
    Inherits from ``TrackedBase`` which provides id (UUID PK), created_at,
    updated_at, created_by_id (NOT NULL) and updated_by_id.

Invariants enforced:
    - All monetary fields use Decimal (maps to Numeric(38,9)) -- NEVER float.
    - Enum fields stored as String(50) containing the enum .value string.
    - One payroll per employee per month (uq_hr_payroll_employee_period).
    - Payroll column names follow the store convention (pf, tds, esi,
      other_deductions).
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hr_kernel.db.base import TrackedBase

# ---------------------------------------------------------------------------
# EmployeeModel
# ---------------------------------------------------------------------------


class EmployeeModel(TrackedBase):
    """
    ORM model for ``Employee``.

    Guarantees:
        - ``employee_code`` is unique (uq_hr_employee_code).
    """

    __tablename__ = "hr_employees"

    employee_code: Mapped[str] = mapped_column(String(50), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_code", name="uq_hr_employee_code"),
        Index("idx_hr_employee_active", "is_active"),
    )

    def to_dto(self):
        from hr_modules.payroll.models import Employee
        return Employee(
            id=self.id,
            employee_code=self.employee_code,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            department=self.department,
            designation=self.designation,
            hire_date=self.hire_date,
            is_active=self.is_active,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "EmployeeModel":
        return cls(
            id=dto.id,
            employee_code=dto.employee_code,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            department=dto.department,
            designation=dto.designation,
            hire_date=dto.hire_date,
            is_active=dto.is_active,
            created_by_id=created_by_id,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<EmployeeModel {self.employee_code}: {self.first_name} {self.last_name}>"


# ---------------------------------------------------------------------------
# SalaryStructureModel
# ---------------------------------------------------------------------------


class SalaryStructureModel(TrackedBase):
    """
    ORM model for ``SalaryStructureRecord``.

    Guarantees:
        - Amount columns are never updated after insert; a revision inserts
          a new row and closes the old one via ``effective_to``/``is_active``.
        - ``ctc`` is stored alongside the components for reporting.
    """

    __tablename__ = "hr_salary_structures"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    hra: Mapped[Decimal] = mapped_column(nullable=False)
    special_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    transport_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    medical_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    other_allowances: Mapped[Decimal] = mapped_column(nullable=False)
    ctc: Mapped[Decimal] = mapped_column(nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_hr_salary_structure_employee", "employee_id", "is_active"),
    )

    def to_dto(self):
        from hr_engines.payroll import SalaryStructure
        from hr_modules.payroll.models import SalaryStructureRecord
        return SalaryStructureRecord(
            id=self.id,
            employee_id=self.employee_id,
            structure=SalaryStructure(
                basic_salary=self.basic_salary,
                hra=self.hra,
                special_allowance=self.special_allowance,
                transport_allowance=self.transport_allowance,
                medical_allowance=self.medical_allowance,
                other_allowances=self.other_allowances,
            ),
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            is_active=self.is_active,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "SalaryStructureModel":
        s = dto.structure
        return cls(
            id=dto.id,
            employee_id=dto.employee_id,
            basic_salary=s.basic_salary,
            hra=s.hra,
            special_allowance=s.special_allowance,
            transport_allowance=s.transport_allowance,
            medical_allowance=s.medical_allowance,
            other_allowances=s.other_allowances,
            ctc=s.ctc,
            effective_from=dto.effective_from,
            effective_to=dto.effective_to,
            is_active=dto.is_active,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<SalaryStructureModel {self.employee_id} ctc={self.ctc} active={self.is_active}>"


# ---------------------------------------------------------------------------
# PayrollModel
# ---------------------------------------------------------------------------


class PayrollModel(TrackedBase):
    """
    ORM model for ``Payroll`` -- one employee, one month.

    Guarantees:
        - Unique per (employee_id, month, year).
        - ``status`` stores the PayrollStatus .value string.
    """

    __tablename__ = "hr_payrolls"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    month: Mapped[int] = mapped_column(nullable=False)
    year: Mapped[int] = mapped_column(nullable=False)
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    hra: Mapped[Decimal] = mapped_column(nullable=False)
    special_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    transport_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    medical_allowance: Mapped[Decimal] = mapped_column(nullable=False)
    other_allowances: Mapped[Decimal] = mapped_column(nullable=False)
    bonus: Mapped[Decimal] = mapped_column(nullable=False)
    total_earnings: Mapped[Decimal] = mapped_column(nullable=False)
    pf: Mapped[Decimal] = mapped_column(nullable=False)
    tds: Mapped[Decimal] = mapped_column(nullable=False)
    esi: Mapped[Decimal] = mapped_column(nullable=False)
    lop_deduction: Mapped[Decimal] = mapped_column(nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(nullable=False)
    working_days: Mapped[int] = mapped_column(nullable=False)
    present_days: Mapped[int] = mapped_column(nullable=False)
    lop_days: Mapped[int] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="draft", nullable=False)
    finalized_at: Mapped[datetime | None] = mapped_column(nullable=True)
    finalized_by_id: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_hr_payroll_employee_period"),
        Index("idx_hr_payroll_created", "created_at"),
    )

    def to_dto(self):
        from hr_modules.payroll.models import Payroll, PayrollStatus
        return Payroll(
            id=self.id,
            employee_id=self.employee_id,
            month=self.month,
            year=self.year,
            basic_salary=self.basic_salary,
            hra=self.hra,
            special_allowance=self.special_allowance,
            transport_allowance=self.transport_allowance,
            medical_allowance=self.medical_allowance,
            other_allowances=self.other_allowances,
            bonus=self.bonus,
            total_earnings=self.total_earnings,
            pf=self.pf,
            tds=self.tds,
            esi=self.esi,
            lop_deduction=self.lop_deduction,
            other_deductions=self.other_deductions,
            total_deductions=self.total_deductions,
            net_pay=self.net_pay,
            working_days=self.working_days,
            present_days=self.present_days,
            lop_days=self.lop_days,
            status=PayrollStatus(self.status),
            finalized_at=self.finalized_at,
            created_at=self.created_at,
        )

    @classmethod
    def from_result(
        cls,
        result,
        employee_id: UUID,
        month: int,
        year: int,
        created_by_id: UUID,
        status: str = "draft",
        finalized_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> "PayrollModel":
        """Build a row from an engine ``PayrollResult``."""
        model = cls(
            employee_id=employee_id,
            month=month,
            year=year,
            status=status,
            finalized_at=finalized_at,
            finalized_by_id=created_by_id if finalized_at is not None else None,
            created_by_id=created_by_id,
            **result.to_row(),
        )
        if created_at is not None:
            model.created_at = created_at
        return model

    def __repr__(self) -> str:
        return f"<PayrollModel {self.employee_id} {self.year}-{self.month:02d} net={self.net_pay}>"
