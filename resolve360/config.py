# resolve360/config.py
import json
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing import Annotated, List, Optional

class Settings(BaseSettings):
    # Database
    database_username: str = "postgres"
    database_password: str = "postgres"
    database_hostname: str = "localhost"
    database_port: str = "5432"
    database_name: str = "resolve360"

    # Auth
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Role allow-lists, empty means use the built-in lists.
    # Comma separated or a JSON list.
    admin_emails: Annotated[List[str], NoDecode] = []
    contractor_emails: Annotated[List[str], NoDecode] = []

    # Issue lifecycle: "permissive" or "monotonic"
    issue_transition_policy: str = "permissive"

    # Image host (unsigned upload preset)
    image_upload_url: str = ""
    image_upload_preset: str = ""
    image_upload_timeout: float = 15.0
    upload_dir: str = "uploads"

    # Retry for transient store errors
    retry_limit: int = 3
    retry_base_delay: float = 2.0

    log_level: str = "INFO"
    log_file: Optional[str] = None

    # CORS
    allowed_origins: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("admin_emails", "contractor_emails", "allowed_origins", mode="before")
    @classmethod
    def split_list(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
