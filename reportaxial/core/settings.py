from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./data/reportaxial.db"
    SQL_ECHO: bool = False

    # Tokens emitidos pelo serviço de autenticação (fora deste core)
    # obrigatório: sem valor por omissão, a app não arranca sem ele
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"

    # Front-end publicado no Netlify
    CORS_ORIGINS: list[str] = ["https://reportaxial.netlify.app"]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
