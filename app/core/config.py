from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # bcrypt cost; в тестах можно снизить до 4
    bcrypt_rounds: int = 12

    log_level: str = "INFO"
    create_tables: bool = True
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
