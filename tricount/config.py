import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Comma separated list, "*" allows any origin
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    DEBUG = os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes")
    PORT = int(os.environ.get("PORT", 5000))

config = Config()
