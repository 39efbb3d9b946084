from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".studybuddy" / "data"
    sqlite_filename: str = "studybuddy.db"
    huggingface_api_key: str = ""
    ai_model_url: str = (
        "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium"
    )
    ai_max_new_tokens: int = 800
    ai_timeout: float = 60.0
    host: str = "127.0.0.1"
    port: int = 0  # 0 = pick a free port
    log_level: str = "warning"

    model_config = {"env_prefix": "STUDYBUDDY_"}

    @property
    def ai_enabled(self) -> bool:
        return bool(self.huggingface_api_key.strip())


settings = Settings()
