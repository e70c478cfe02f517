from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROTOYAML_",
        extra="ignore",
    )
    any_type_key: str = "@type"
    use_c_loader: bool = True
    log_level: str = "WARNING"


protoyaml_settings = Settings()
