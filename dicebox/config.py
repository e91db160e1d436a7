from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from dicebox.errors import StartupError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Target DynamoDB table. Required; there is no sensible default.
    table_name: str = Field(min_length=1)

    # "Remote" talks to AWS using the ambient credential chain.
    # Anything else (including unset) uses the local DynamoDB container.
    dynamodb_config: str = "Local"

    # Partition key value written with every roll.
    record_name: str = "RollResult"

    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment, failing fast on missing values.

    Raises:
        StartupError: If a required variable (e.g. TABLE_NAME) is absent or invalid.
    """
    try:
        return Settings()
    except ValidationError as exc:
        missing = ", ".join(str(err["loc"][0]).upper() for err in exc.errors() if err["loc"])
        raise StartupError(f"Invalid configuration: {missing or exc}") from exc
