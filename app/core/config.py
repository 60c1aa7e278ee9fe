from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./arena.db"
    LOG_DIR: str = "logs"

    JDOODLE_CLIENT_ID: Optional[str] = None
    JDOODLE_CLIENT_SECRET: Optional[str] = None
    JDOODLE_API_URL: str = "https://api.jdoodle.com/v1/execute"
    JDOODLE_LANGUAGE: str = "nodejs"
    JDOODLE_VERSION_INDEX: str = "4"
    EXECUTION_TIMEOUT_SEC: float = 30.0
    GRADING_CONCURRENCY: int = 4

    BADGE_CONTRACT_ADDRESS: str = ""
    BADGE_CHAIN_ID: str = "0xaa36a7"
    BADGE_URI_TEMPLATE: str = (
        "https://api.dicebear.com/7.x/identicon/svg?seed={question_hash}"
        "&contestId={contest_id}&problem={problem_index}"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
