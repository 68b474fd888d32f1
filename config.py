# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "lms_db")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 7)))

# Server
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

# AI assistant ("http" posts to AI_API_URL directly, "openai" goes through the SDK)
AI_PROVIDER = os.getenv("AI_PROVIDER", "http")
AI_API_URL = os.getenv("AI_API_URL", "https://api.deepseek.com")
AI_API_KEY = os.getenv("AI_API_KEY", "")
AI_MODEL = os.getenv("AI_MODEL", "deepseek-chat")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))
AI_MAX_RETRIES = int(os.getenv("AI_MAX_RETRIES", "2"))

# Quizzes
DEFAULT_PASSING_SCORE = 70
RESULTS_HISTORY_LIMIT = 10
