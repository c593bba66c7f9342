"""Settings service - tax, business information and receipt layout."""

import logging
from dataclasses import fields, replace
from typing import Any, Dict, Mapping

from pos.exceptions import ValidationError
from pos.models import TaxSettings, BusinessInfo, ReceiptSettings
from pos.services.storage_service import (
    DocumentStore, TAX_SETTINGS_KEY, BUSINESS_INFO_KEY, RECEIPT_SETTINGS_KEY
)
from pos.utils.number_format import parse_money

logger = logging.getLogger(__name__)


def _check_fields(updates: Dict[str, Any], model) -> None:
    if not isinstance(updates, dict):
        raise ValidationError('Settings must be an object')
    known = {f.name for f in fields(model)}
    unknown = set(updates) - known
    if unknown:
        raise ValidationError(f'Unknown setting(s): {", ".join(sorted(unknown))}')


def _check_types(updates: Dict[str, Any], model) -> None:
    for f in fields(model):
        if f.name not in updates:
            continue
        value = updates[f.name]
        if f.type in (bool, 'bool') and not isinstance(value, bool):
            raise ValidationError(f'{f.name} must be true or false')
        if f.type in (str, 'str') and not isinstance(value, str):
            raise ValidationError(f'{f.name} must be text')


class SettingsStore:
    """
    Global settings documents.

    Until a document is saved for the first time its defaults come from the
    application configuration.
    """

    def __init__(self, documents: DocumentStore, config: Mapping[str, Any]):
        self._documents = documents
        self._config = config

    # -- defaults ------------------------------------------------------

    def _default_tax_settings(self) -> TaxSettings:
        return TaxSettings(
            enabled=bool(self._config.get('DEFAULT_TAX_ENABLED', True)),
            rate=parse_money(self._config.get('DEFAULT_TAX_RATE', '20')),
            name=self._config.get('DEFAULT_TAX_NAME', 'Tax'),
        )

    def _default_business_info(self) -> BusinessInfo:
        return BusinessInfo(
            name=self._config.get('BUSINESS_NAME', ''),
            address=self._config.get('BUSINESS_ADDRESS', ''),
            phone=self._config.get('BUSINESS_PHONE', ''),
            email=self._config.get('BUSINESS_EMAIL', ''),
        )

    # -- tax -----------------------------------------------------------

    def get_tax_settings(self) -> TaxSettings:
        doc = self._documents.load(TAX_SETTINGS_KEY, lambda: None)
        return TaxSettings.from_dict(doc) if doc is not None else self._default_tax_settings()

    def update_tax_settings(self, updates: Dict[str, Any]) -> TaxSettings:
        _check_fields(updates, TaxSettings)
        values = dict(updates)
        if 'enabled' in values and not isinstance(values['enabled'], bool):
            raise ValidationError('enabled must be true or false')
        if 'rate' in values:
            try:
                values['rate'] = parse_money(values['rate'])
            except ValueError as e:
                raise ValidationError(f'Invalid tax rate: {e}')
        if 'name' in values:
            if not isinstance(values['name'], str):
                raise ValidationError('name must be text')
            values['name'] = values['name'].strip() or 'Tax'
        if 'tax_number' in values:
            values['tax_number'] = (values['tax_number'] or '').strip() or None

        with self._documents.lock(TAX_SETTINGS_KEY):
            settings = replace(self.get_tax_settings(), **values)
            self._documents.save(TAX_SETTINGS_KEY, settings.to_dict())
        logger.info(f"[SETTINGS] Tax settings updated: enabled={settings.enabled} rate={settings.rate}")
        return settings

    # -- business info -------------------------------------------------

    def get_business_info(self) -> BusinessInfo:
        doc = self._documents.load(BUSINESS_INFO_KEY, lambda: None)
        return BusinessInfo.from_dict(doc) if doc is not None else self._default_business_info()

    def update_business_info(self, updates: Dict[str, Any]) -> BusinessInfo:
        _check_fields(updates, BusinessInfo)
        _check_types(updates, BusinessInfo)
        values = {k: v.strip() for k, v in updates.items()}
        with self._documents.lock(BUSINESS_INFO_KEY):
            info = replace(self.get_business_info(), **values)
            self._documents.save(BUSINESS_INFO_KEY, info.to_dict())
        logger.info("[SETTINGS] Business info updated")
        return info

    # -- receipt settings ----------------------------------------------

    def get_receipt_settings(self) -> ReceiptSettings:
        doc = self._documents.load(RECEIPT_SETTINGS_KEY, lambda: None)
        return ReceiptSettings.from_dict(doc) if doc is not None else ReceiptSettings()

    def update_receipt_settings(self, updates: Dict[str, Any]) -> ReceiptSettings:
        _check_fields(updates, ReceiptSettings)
        _check_types(updates, ReceiptSettings)
        with self._documents.lock(RECEIPT_SETTINGS_KEY):
            settings = replace(self.get_receipt_settings(), **updates)
            self._documents.save(RECEIPT_SETTINGS_KEY, settings.to_dict())
        logger.info("[SETTINGS] Receipt settings updated")
        return settings
