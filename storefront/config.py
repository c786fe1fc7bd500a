import os

class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    OTP_SEND_LIMIT_PER_IP = os.getenv("OTP_SEND_LIMIT_PER_IP", "5 per 15 minutes")
    LOGIN_LIMIT_PER_IP = os.getenv("LOGIN_LIMIT_PER_IP", "10 per 30 minutes")
    ORDER_LIMIT_PER_IP = os.getenv("ORDER_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "candle-craft")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 15))
    REFRESH_TOKEN_LIFETIME_DAYS = int(os.getenv("REFRESH_TOKEN_LIFETIME_DAYS", 30))
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "candle-craft-storefront")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    OTEL_TRACES_EXPORTER = os.getenv("OTEL_TRACES_EXPORTER", "otlp")

    # Cart pricing
    PLATFORM_FEE = float(os.getenv("PLATFORM_FEE", 7))
    GIFT_CHARGE = float(os.getenv("GIFT_CHARGE", 30))
    CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "candle-craft-cart")

    # Phone verification
    OTP_RESEND_COOLDOWN_SEC = int(os.getenv("OTP_RESEND_COOLDOWN_SEC", 120))
    OTP_EXPIRY_MIN = int(os.getenv("OTP_EXPIRY_MIN", 10))
    OTP_MAX_ATTEMPTS = int(os.getenv("OTP_MAX_ATTEMPTS", 5))
    OTP_DAILY_QUOTA = int(os.getenv("OTP_DAILY_QUOTA", 10))

    # Accounts
    MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", 6))
    SYNTHETIC_EMAIL_DOMAIN = os.getenv("SYNTHETIC_EMAIL_DOMAIN", "temp.candle-craft.com")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    JWT_SECRET = "test-jwt-key"
    OTEL_TRACES_EXPORTER = "none"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")

    @staticmethod
    def validate():
        missing = []
        for name in ("SECRET_KEY", "DATABASE_URL", "JWT_SECRET"):
            if not os.getenv(name):
                missing.append(name)
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
