"""Tests for CompanyService."""

import logging
from decimal import Decimal
from uuid import uuid4

import pytest

from core.audit import AuditAction
from core.config import InvoicingConfig
from core.exceptions import DomainValidationError, NotFoundError
from core.models import CompanyCreate, CompanyUpdate
from core.services.company_service import CompanyService


class TestCreateCompany:

    def test_create_and_get(self, company_service):
        created = company_service.create_company(CompanyCreate(name="Café Central"))

        fetched = company_service.get_company()
        assert fetched.id == created.id
        assert fetched.name == "Café Central"

    def test_tip_defaults_from_config(self, company_repo, audit):
        service = CompanyService(
            company_repo, audit,
            InvoicingConfig(default_tip_percentage=Decimal("15"), default_tip_enabled=False),
        )

        company = service.create_company(CompanyCreate(name="A"))

        assert company.tip_percentage == Decimal("15")
        assert company.tip_enabled is False

    def test_explicit_tip_overrides_defaults(self, company_service):
        company = company_service.create_company(
            CompanyCreate(name="A", tip_percentage=Decimal("0"), tip_enabled=False)
        )

        assert company.tip_percentage == Decimal("0")
        assert company.tip_enabled is False

    def test_tip_percentage_clamped(self, company_service):
        company = company_service.create_company(
            CompanyCreate(name="A", tip_percentage=Decimal("130"))
        )
        assert company.tip_percentage == Decimal("100")

    def test_audits_creation(self, company_service, audit):
        company = company_service.create_company(CompanyCreate(name="A"))

        audit.log_change.assert_called_once()
        kwargs = audit.log_change.call_args.kwargs
        assert kwargs["entity_type"] == "company"
        assert kwargs["entity_id"] == company.id
        assert kwargs["action"] == AuditAction.CREATE


class TestHasCompanyData:

    def test_false_before_setup(self, company_service):
        assert company_service.get_company() is None
        assert company_service.has_company_data() is False

    def test_true_after_setup(self, company_service, company):
        assert company_service.has_company_data() is True


class TestUpdateCompany:

    def test_updates_only_given_fields(self, company_service, company):
        updated = company_service.update_company(company.id, CompanyUpdate(phone="555-0100"))

        assert updated.phone == "555-0100"
        assert updated.name == company.name
        assert updated.tax_id == company.tax_id

    def test_persists(self, company_service, company):
        company_service.update_company(company.id, CompanyUpdate(name="New Name"))
        assert company_service.get_company().name == "New Name"

    def test_audits_changed_fields(self, company_service, company, audit):
        audit.reset_mock()

        company_service.update_company(company.id, CompanyUpdate(name="New Name"))

        kwargs = audit.log_change.call_args.kwargs
        assert kwargs["action"] == AuditAction.UPDATE
        assert kwargs["changes"]["name"] == {"old": "Café Central", "new": "New Name"}

    def test_empty_update_returns_current(self, company_service, company, audit):
        audit.reset_mock()

        result = company_service.update_company(company.id, CompanyUpdate())

        assert result.id == company.id
        audit.log_change.assert_not_called()

    def test_unknown_fields_ignored_with_warning(self, company_service, company, caplog):
        with caplog.at_level(logging.WARNING, logger="core.services.company_service"):
            result = company_service.update_company(company.id, CompanyUpdate(color="red"))

        assert result.name == company.name
        assert "color" in caplog.text

    def test_missing_id_rejected(self, company_service):
        with pytest.raises(DomainValidationError, match="Company ID is required"):
            company_service.update_company(None, CompanyUpdate(name="X"))

    def test_unknown_id_not_found(self, company_service):
        with pytest.raises(NotFoundError):
            company_service.update_company(uuid4(), CompanyUpdate(name="X"))


class TestUpdateTipSettings:

    def test_updates_and_clamps(self, company_service, company):
        updated = company_service.update_tip_settings(company.id, Decimal("-4"), False)

        assert updated.tip_percentage == Decimal("0")
        assert updated.tip_enabled is False
        assert company_service.get_company().tip_enabled is False

    def test_missing_id_rejected(self, company_service):
        with pytest.raises(DomainValidationError):
            company_service.update_tip_settings(None, Decimal("5"), True)
