from pydantic_settings import BaseSettings
from typing import List, Optional
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    # Project settings
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Tasks List App")
    API_V1_STR: str = "/api/v1"

    # Which backend serves identity and the todos table: "supabase" or "local"
    BACKEND: str = os.getenv("BACKEND", "supabase")

    # Hosted backend settings
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = os.getenv("SUPABASE_ANON_KEY")

    # Local backend settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./todo.db")
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "false").lower() == "true"

    # JWT settings (local backend tokens)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-super-secret-key-change-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Session cookie
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "tasks_session")
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "false").lower() == "true"

    # Comma separated list of frontend origins
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        # Variables in .env that aren't defined here are ignored.
        extra = "ignore"

settings = Settings()
