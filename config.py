import os

# Storage
DB_NAME = os.getenv("CAMPUS_DB_NAME", "db.sqlite3")
STORAGE_QUOTA_BYTES = int(os.getenv("STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024)))  # 5MB, same as browser localStorage

# Tokens
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))  # 7 days
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Accounts
INSTITUTIONAL_DOMAIN = os.getenv("INSTITUTIONAL_DOMAIN", "igdtuw.ac.in")
ADMIN_EMAILS = [
    email.strip().lower()
    for email in os.getenv("ADMIN_EMAILS", f"admin@{INSTITUTIONAL_DOMAIN}").split(",")
    if email.strip()
]
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password123")  # Change this in production!
BUILTIN_ACCOUNTS = {
    f"admin@{INSTITUTIONAL_DOMAIN}": {"name": "Admin", "password": ADMIN_PASSWORD},
}
LOGIN_DELAY_SECONDS = float(os.getenv("LOGIN_DELAY_SECONDS", "0.8"))

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:8080").split(",")
    if origin.strip()
]
PORT = int(os.getenv("PORT", "21541"))
