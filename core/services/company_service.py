"""
Company service for the tenant's company profile.

There is a single profile per deployment ("find first"). Its tip settings
are read when an invoice is created and copied into the invoice.
"""

import logging
from uuid import UUID

from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import InvoicingConfig
from core.exceptions import DomainValidationError, NotFoundError
from core.models import Company, CompanyCreate, CompanyUpdate
from core.repositories.base import CompanyRepository
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

# Fields that may be changed through update_company
_UPDATABLE_FIELDS = {
    "name", "address", "phone", "email", "website",
    "tax_id", "logo", "tip_percentage", "tip_enabled"
}


class CompanyService:
    """Service for company profile operations."""

    def __init__(
        self,
        companies: CompanyRepository,
        audit: AuditLogger,
        config: InvoicingConfig | None = None
    ):
        self.companies = companies
        self.audit = audit
        self.config = config or InvoicingConfig()

    def get_company(self) -> Company | None:
        """The company profile, or None before setup."""
        return self.companies.find_first()

    def has_company_data(self) -> bool:
        """Whether a usable company profile exists."""
        company = self.get_company()
        return company is not None and company.is_complete

    def create_company(self, data: CompanyCreate) -> Company:
        """
        Create the company profile.

        Tip settings not given fall back to the configured defaults.
        """
        tip_percentage = data.tip_percentage
        if tip_percentage is None:
            tip_percentage = self.config.default_tip_percentage
        tip_enabled = data.tip_enabled
        if tip_enabled is None:
            tip_enabled = self.config.default_tip_enabled

        company = Company(
            name=data.name,
            address=data.address,
            phone=data.phone,
            email=data.email,
            website=data.website,
            tax_id=data.tax_id,
            logo=data.logo,
            tip_percentage=tip_percentage,
            tip_enabled=tip_enabled,
        )
        saved = self.companies.save(company)

        self.audit.log_change(
            entity_type="company",
            entity_id=saved.id,
            action=AuditAction.CREATE,
            changes={"created": saved.model_dump(mode="json")}
        )
        logger.info(f"Created company profile {saved.id}")

        return saved

    def _require(self, company_id: UUID | None) -> Company:
        if company_id is None:
            raise DomainValidationError("Company ID is required")

        company = self.companies.find_by_id(company_id)
        if company is None:
            raise NotFoundError("Company", company_id)
        return company

    def update_company(self, company_id: UUID | None, data: CompanyUpdate) -> Company:
        """
        Update company fields. Only non-None fields are changed.

        Existing invoices keep the snapshot taken when they were created.

        Raises:
            DomainValidationError: If company_id is missing
            NotFoundError: If no company has that id
        """
        current = self._require(company_id)

        updates = data.model_dump(exclude_none=True)
        if not updates:
            return current

        for field in updates:
            if field not in _UPDATABLE_FIELDS:
                logger.warning(
                    f"Attempted to update unknown field '{field}' on company {company_id}"
                )

        valid_updates = {k: v for k, v in updates.items() if k in _UPDATABLE_FIELDS}
        if not valid_updates:
            return current

        merged = current.model_dump()
        merged.update(valid_updates)
        merged["updated_at"] = now_utc()
        updated = self.companies.update(Company.model_validate(merged))

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="company",
                entity_id=updated.id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def update_tip_settings(self, company_id: UUID | None, tip_percentage, tip_enabled: bool) -> Company:
        """
        Change tip settings; the percentage is clamped to [0, 100].

        Raises:
            DomainValidationError: If company_id is missing
            NotFoundError: If no company has that id
        """
        current = self._require(company_id)
        company = current.model_copy(deep=True)
        company.update_tip_settings(tip_percentage, tip_enabled)
        updated = self.companies.update(company)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="company",
                entity_id=updated.id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated
