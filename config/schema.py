"""
Configuration schema with validation.

All configuration is validated at load time using Pydantic.
"""

from pydantic import BaseModel, Field, field_validator, model_validator


class ApiKeysConfig(BaseModel):
    """API key configuration (loaded from environment)."""

    # Optional keys - every provider that needs one is skipped without it
    finnhub: str | None = Field(default=None, description="Finnhub API key")
    alpha_vantage: str | None = Field(default=None, description="Alpha Vantage API key")
    anthropic: str | None = Field(default=None, description="Reasoning service API key")


class HttpConfig(BaseModel):
    """HTTP client configuration."""

    timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; VectorScope/1.0)",
        min_length=1,
    )


class ReasoningConfig(BaseModel):
    """External reasoning service."""

    enabled: bool = Field(default=True, description="Use the service when a key is set")
    api_url: str = Field(default="https://api.anthropic.com/v1/messages")
    model: str = Field(default="claude-sonnet-4-5", min_length=1)
    max_tokens: int = Field(default=1500, ge=256, le=8192)
    anthropic_version: str = Field(default="2023-06-01")
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=120.0)


class AcquisitionConfig(BaseModel):
    """Market data acquisition settings."""

    history_bars: int = Field(default=100, ge=26, le=100)
    history_range: str = Field(default="6mo")
    news_lookback_days: int = Field(default=7, ge=1, le=30)
    news_limit: int = Field(default=10, ge=1, le=50)
    events_window_days: int = Field(default=90, ge=7, le=365)
    synthetic_seed: int | None = Field(
        default=None,
        description="Fixed seed for synthetic data; derived from the ticker when unset",
    )

    @field_validator("history_range")
    @classmethod
    def validate_range(cls, v: str) -> str:
        allowed = {"1mo", "3mo", "6mo", "1y"}
        if v not in allowed:
            raise ValueError(f"history_range must be one of {sorted(allowed)}")
        return v


class SignalWeightsConfig(BaseModel):
    """Weights for the secondary multi-signal score."""

    technical: float = Field(default=0.35, ge=0.0, le=1.0)
    options: float = Field(default=0.20, ge=0.0, le=1.0)
    sentiment: float = Field(default=0.15, ge=0.0, le=1.0)
    social: float = Field(default=0.15, ge=0.0, le=1.0)
    events: float = Field(default=0.15, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "SignalWeightsConfig":
        total = self.technical + self.options + self.sentiment + self.social + self.events
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Signal weights must sum to 1.0, got {total}")
        return self

    def as_dict(self) -> dict[str, float]:
        return self.model_dump()


class VectorScopeConfig(BaseModel):
    """
    Root configuration model.

    All settings are validated on load.
    """

    api_keys: ApiKeysConfig = Field(default_factory=ApiKeysConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    reasoning: ReasoningConfig = Field(default_factory=ReasoningConfig)
    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    signal_weights: SignalWeightsConfig = Field(default_factory=SignalWeightsConfig)

    @property
    def reasoning_enabled(self) -> bool:
        return self.reasoning.enabled and bool(self.api_keys.anthropic)

    def with_timeout(self, timeout_seconds: float | None) -> "VectorScopeConfig":
        """
        Copy with every outbound timeout set to `timeout_seconds`.

        Raises:
            pydantic.ValidationError: If the timeout is outside the HTTP or
                reasoning bounds
        """
        if timeout_seconds is None:
            return self
        http = HttpConfig.model_validate({**self.http.model_dump(), "timeout_seconds": timeout_seconds})
        reasoning = ReasoningConfig.model_validate(
            {**self.reasoning.model_dump(), "timeout_seconds": timeout_seconds}
        )
        return self.model_copy(update={"http": http, "reasoning": reasoning})
