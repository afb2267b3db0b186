import dotenv
import os

dotenv.load_dotenv()

PORT = int(os.getenv("PORT", "8000"))

if not PORT:
    raise ValueError("PORT is not set")

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "stepfun/step-3.5-flash:free")
OPENROUTER_REFERER = os.getenv("OPENROUTER_REFERER", "http://localhost:3000")

if not OPENROUTER_API_KEY:
    print("Warning: OPENROUTER_API_KEY is not set. Generation and edits will not work.")

DEBUG_MODE = os.getenv("DEBUG_MODE", "true").lower() in ("1", "true", "yes")

GENERATION_MAX_TOKENS = int(os.getenv("GENERATION_MAX_TOKENS", "65000"))
GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
