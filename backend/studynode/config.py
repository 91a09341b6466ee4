from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    studynode_data_dir: Path = Path.home() / ".studynode" / "data"
    sqlite_filename: str = "studynode.db"
    log_level: str = "INFO"

    # OpenAI-compatible chat completion endpoints
    llm_provider: str = "openai"  # "openai" or "groq"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"
    llm_timeout_s: float = 120.0
    llm_max_tokens: int = 4000

    model_config = {"env_prefix": "STUDYNODE_"}


settings = Settings()
