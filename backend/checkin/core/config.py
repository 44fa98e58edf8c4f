from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Attendee Check-in"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "checkin.log"  # empty string disables the file handler
    LOG_MAX_BYTES: int = 10485760  # 10MB
    LOG_BACKUP_COUNT: int = 5

    # File Upload
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_LIST_EXTENSIONS: List[str] = ["csv", "xlsx", "xlsm", "pdf"]
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png", "image/jpg", "image/webp"]

    # Matching
    # Probed in order; the first populated field is the record's identifier
    IDENTIFIER_FIELDS: List[str] = ["registration_id", "RegistrationID", "registration_ID", "id"]

    # Ingestion
    FREE_TEXT_ATTENDEE_NAME: str = "Participant"
    CSV_DELIMITERS: str = ",;\t|"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
