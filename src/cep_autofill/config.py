"""cep-autofill configuration: label source, address providers, fill policy."""

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cep_autofill.core.types import FieldName


class ProviderSpec(BaseModel):
    """Declarative description of one address-lookup provider.

    Adding a provider is a configuration change: the generic HTTP adapter
    reads the URL template, the field mapping, and the not-found signals
    from here.
    """

    name: str
    url_template: str
    # canonical record field -> provider payload key
    field_map: dict[str, str]
    not_found_statuses: list[int] = [404]
    # any payload key/value pair listed here marks "not found"; "*" matches any truthy value
    not_found_markers: list[dict[str, object]] = []
    timeout: float | None = None

    @field_validator("url_template")
    @classmethod
    def _needs_cep_placeholder(cls, v: str) -> str:
        if "{cep}" not in v:
            raise ValueError("url_template must contain a {cep} placeholder")
        return v


DEFAULT_PROVIDERS: list[ProviderSpec] = [
    ProviderSpec(
        name="viacep",
        url_template="https://viacep.com.br/ws/{cep}/json/",
        field_map={
            "code": "cep",
            "state": "uf",
            "city": "localidade",
            "neighborhood": "bairro",
            "street": "logradouro",
            "complement": "complemento",
        },
        not_found_statuses=[400, 404],
        not_found_markers=[{"erro": True}, {"erro": "true"}],
    ),
    ProviderSpec(
        name="brasilapi",
        url_template="https://brasilapi.com.br/api/cep/v2/{cep}",
        field_map={
            "code": "cep",
            "state": "state",
            "city": "city",
            "neighborhood": "neighborhood",
            "street": "street",
            "complement": "complemento",
        },
        not_found_statuses=[404],
        not_found_markers=[{"type": "service_error"}, {"type": "validation_error"}],
    ),
    ProviderSpec(
        name="opencep",
        url_template="https://opencep.com/v1/{cep}",
        field_map={
            "code": "cep",
            "state": "uf",
            "city": "localidade",
            "neighborhood": "bairro",
            "street": "logradouro",
            "complement": "complemento",
        },
        not_found_statuses=[404],
        not_found_markers=[{"error": "*"}],
    ),
]


class Settings(BaseSettings):
    # Label translations
    labels_url: str = "https://raw.githubusercontent.com/Muatsuu/CEP_OPERA/refs/heads/main/translateLabels.json"
    label_timeout: float = 10.0

    # Polling
    poll_interval: float = 2.0

    # Address providers, in priority order
    provider_timeout: float = 5.0
    providers: list[ProviderSpec] = Field(default_factory=lambda: list(DEFAULT_PROVIDERS))

    # Fill policy
    required_fields: list[FieldName] = [FieldName.CEP, FieldName.STREET, FieldName.NUMBER]
    autofill_fields: list[FieldName] = [
        FieldName.STREET,
        FieldName.NEIGHBORHOOD,
        FieldName.COMPLEMENT,
        FieldName.NUMBER,
        FieldName.CITY,
        FieldName.STATE,
    ]
    # code -> value written into the "number" field; any other code clears it
    number_overrides: dict[str, str] = {"14027250": "780"}
    clear_on_failure: bool = False

    # Confirmation
    notification_text: str = "Feito!"
    notification_duration: float = 1.0

    # Post-fill scrubbing of partner-relay contact data
    scrub_enabled: bool = True
    scrub_on_tick: bool = True
    scrub_email_suffixes: list[str] = [
        "@guest.booking.com",
        "@cvccorp.com",
        "m.expediapartnercentral.com",
    ]

    # Logging
    log_json: bool = False
    log_level: str = "INFO"

    # MLflow tracing (off unless asked for; spans go to mlflow_tracking_uri)
    tracing_enabled: bool = False
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "cep-autofill"

    @model_validator(mode="after")
    def _cep_always_required(self) -> "Settings":
        """The code field anchors the binding, so it can never be optional."""
        if FieldName.CEP not in self.required_fields:
            self.required_fields = [FieldName.CEP, *self.required_fields]
        return self

    @model_validator(mode="after")
    def _lowercase_suffixes(self) -> "Settings":
        self.scrub_email_suffixes = [s.strip().lower() for s in self.scrub_email_suffixes if s.strip()]
        return self

    model_config = SettingsConfigDict(env_prefix="CEP_AUTOFILL_", env_file=".env", extra="ignore")


settings = Settings()
