from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "qcm-extract"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    QUESTIONS_CSV_PATH: str = "answers-driving-exams-parsed.csv"
    FLASHCARDS_CSV_PATH: str = "Road_Signs_Quiz_FlashCard.csv"
    SIGNS_QUIZ_CSV_PATH: str = "Road_Signs_Quiz_Version.csv"
    EXAM_PDF_PATH: str = "exam-questions.pdf"

    DATA_DIR: str = "data"
    PUBLIC_DATA_DIR: str = "public/data"
    SIGNS_ASSETS_DIR: str = "assets/signs"
    PUBLIC_SIGNS_ASSETS_DIR: str = "public/assets/signs"
    SIGN_IMAGES_DIR: str = "sign_images_by_id"
    PUBLIC_SIGN_IMAGES_DIR: str = "public/assets/sign_images_by_id"

    PDF_USE_OCR: bool = True
    OCR_LANG: str = "ara"
    OCR_MIN_TEXT_LENGTH: int = 120
    OCR_PSM: int = 6
    OCR_DPI: int = 200


settings = Settings()
