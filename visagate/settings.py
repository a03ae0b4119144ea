import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    # iVisa provider (merged eligibility endpoint)
    ivisa_api_url: str = Field(
        default="https://api.ivisa.com/visa-options", alias="IVISA_API_URL"
    )
    ivisa_api_key: str = Field(default="", alias="IVISA_API_KEY")

    # Generic visa provider (pass-through endpoint)
    visa_api_url: str = Field(
        default="https://api.example.com/visa-options", alias="VISA_API_URL"
    )
    visa_api_key: str = Field(default="", alias="VISA_API_KEY")

    # Per-attempt HTTP timeout in seconds
    upstream_timeout: float = Field(default=10.0, alias="UPSTREAM_TIMEOUT")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./visagate.db", alias="DATABASE_URL"
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # HTTP server
    host: str = Field(default="0.0.0.0", alias="VISAGATE_HOST")
    port: int = Field(default=8080, alias="VISAGATE_PORT")


global_settings = Settings.model_validate(dict(os.environ))
