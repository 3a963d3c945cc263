from statement_pipeline.config.settings import Settings
from statement_pipeline.sanitization.base import BaseSanitizer
from statement_pipeline.sanitization.models import SanitizationConfig
from statement_pipeline.sanitization.sanitizer import Sanitizer


class SanitizerFactory:
    """Creates the configured sanitizer."""

    @classmethod
    def create(cls, settings: Settings) -> BaseSanitizer:
        config = SanitizationConfig(
            account_numbers=settings.sanitize_account_numbers,
            mobile_numbers=settings.sanitize_mobile_numbers,
            emails=settings.sanitize_emails,
            pan_ids=settings.sanitize_pan_ids,
            customer_ids=settings.sanitize_customer_ids,
            ifsc_codes=settings.sanitize_ifsc_codes,
            card_numbers=settings.sanitize_card_numbers,
            addresses=settings.sanitize_addresses,
            names=settings.sanitize_names,
            mask_character=settings.sanitization_mask_character,
            preserve_format=settings.sanitization_preserve_format,
        )
        return Sanitizer(config)
