from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"
    pdf_fallback_engine: str = "pymupdf"

    llm_provider: str = "openai"

    llm_openai_api_key: str = ""
    llm_openai_model_name: str = ""
    llm_openai_timeout_seconds: int = 30
    llm_openai_temperature: float = 0.0

    llm_openai_compatible_api_key: str = ""
    llm_openai_compatible_model_name: str = ""
    llm_openai_compatible_timeout_seconds: int = 30
    llm_openai_compatible_base_url: str = ""

    llm_openrouter_api_key: str = ""
    llm_openrouter_model_name: str = ""
    llm_openrouter_timeout_seconds: int = 30

    llm_groq_api_key: str = ""
    llm_groq_model_name: str = ""
    llm_groq_timeout_seconds: int = 30

    llm_together_api_key: str = ""
    llm_together_model_name: str = ""
    llm_together_timeout_seconds: int = 30

    llm_deepseek_api_key: str = ""
    llm_deepseek_model_name: str = ""
    llm_deepseek_timeout_seconds: int = 30

    llm_ollama_api_key: str = "ollama"
    llm_ollama_model_name: str = ""
    llm_ollama_timeout_seconds: int = 60

    validation_page_count: int = 3
    validation_primary_enabled: bool = True

    page_delay_seconds: float = 0.5
    average_seconds_per_page: float = 3.0

    sanitize_account_numbers: bool = True
    sanitize_mobile_numbers: bool = True
    sanitize_emails: bool = True
    sanitize_pan_ids: bool = True
    sanitize_customer_ids: bool = True
    sanitize_ifsc_codes: bool = True
    sanitize_card_numbers: bool = True
    sanitize_addresses: bool = True
    sanitize_names: bool = False
    sanitization_mask_character: str = "*"
    sanitization_preserve_format: bool = True
