# config.py
"""
Application settings, read once from the environment (.env supported).
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


def env_flag(name: str, default: str = "0") -> bool:
     v = os.getenv(name, default).strip().lower()
     return v in ("1", "true", "yes", "on")


APP_NAME = "Emperium City GRS"

# Database: DATABASE_URL wins, otherwise Azure SQL through pymssql
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")


def database_url() -> str:
     url = os.getenv("DATABASE_URL")
     if url:
          return url
     safe_user = quote_plus(DB_USER or "")
     safe_pass = quote_plus(DB_PASS or "")
     return f"mssql+pymssql://{safe_user}:{safe_pass}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"


SQL_ECHO = env_flag("SQL_ECHO", "false")

# Tokens
JWT_SECRET = os.getenv("JWT_SECRET", "emperium-city-grs-secret-2026")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "24"))

# Passwords
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "Admin@123")
DEFAULT_SUB_ADMIN_PASSWORD = os.getenv("DEFAULT_SUB_ADMIN_PASSWORD", "SubAdmin@123")
DEFAULT_EMPLOYEE_PASSWORD = os.getenv("DEFAULT_EMPLOYEE_PASSWORD", "Emp@123")
DEFAULT_CUSTOMER_PASSWORD = os.getenv("DEFAULT_CUSTOMER_PASSWORD", "Customer@123")
ALLOW_SETUP = env_flag("ALLOW_SETUP", "0")

# CORS ("*" = every origin)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Outbound email mirror for notifications (Brevo)
EMAIL_NOTIFICATIONS = env_flag("EMAIL_NOTIFICATIONS", "0")
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
MAIL_SENDER = os.getenv("MAIL_SENDER", "noreply@emperiumcity.in")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
