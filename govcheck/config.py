"""
govcheck Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
The LLM API key is optional at startup; the assessment endpoint reports a
missing key per request.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── LLM ──
    groq_api_key: str = Field(default="", description="Groq API key for the LLM gateway")
    govcheck_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Model identifier for Groq completions",
    )
    llm_timeout: float = Field(default=30.0, description="LLM request timeout in seconds")
    llm_max_retries: int = Field(
        default=1,
        ge=0,
        le=1,
        description="Retries after a transient LLM failure (at most one)",
    )
    llm_temperature: float = Field(default=0.1, description="Temperature for JSON assessments")
    llm_analysis_temperature: float = Field(
        default=0.3, description="Temperature for gap-analysis narrative"
    )
    llm_max_tokens_assessment: int = Field(
        default=1200, description="Token cap for the standard assessment call"
    )
    llm_max_tokens_analysis: int = Field(
        default=400, description="Token cap for the gap-analysis narrative call"
    )
    llm_fallback_enabled: bool = Field(
        default=False,
        description="Substitute canned analysis when the LLM fails instead of returning an error",
    )

    # ── Scoring ──
    score_floor: int = Field(
        default=10, ge=0, le=100, description="Minimum adjusted risk score per category"
    )
    compliance_floor: int = Field(
        default=10, ge=0, le=100, description="Lower bound of the overall compliance score"
    )
    compliance_ceiling: int = Field(
        default=100, ge=0, le=100, description="Upper bound of the overall compliance score"
    )
    mitigation_credit_weight: float = Field(
        default=0.5,
        ge=0.0,
        description="Share of total risk reduction credited to the compliance score",
    )
    mitigation_score_threshold: int = Field(
        default=50,
        description="Adjusted risk score at or above which framework mitigations are listed",
    )

    # ── Reference data ──
    framework_data_dir: Path = Field(
        default=DEFAULT_DATA_DIR, description="Directory holding framework JSON files"
    )

    # ── Email ──
    smtp_host: str = Field(default="", description="SMTP server host; empty disables email")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_username: str = Field(default="", description="SMTP login user")
    smtp_password: str = Field(default="", description="SMTP login password")
    smtp_from_addr: str = Field(default="", description="Sender address for report emails")
    smtp_use_tls: bool = Field(default=True, description="Issue STARTTLS before login")
    smtp_timeout: float = Field(default=30.0, description="SMTP connection timeout in seconds")

    # ── HTTP ──
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Audit ──
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, imported by other modules
settings = Settings()
