import os


class Config:
    """Giá trị chung cho mọi môi trường, đọc từ biến môi trường (.env)."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "arts-center-dev-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "arts_center_db")

    # Chính sách tính học phí khi vào/nghỉ giữa tháng: full_month | cutoff_day | linear
    PRORATION_POLICY = os.environ.get("PRORATION_POLICY", "cutoff_day")
    PRORATION_CUTOFF_DAY = int(os.environ.get("PRORATION_CUTOFF_DAY", "15"))

    PAGE_FETCH_WORKERS = int(os.environ.get("PAGE_FETCH_WORKERS", "5"))

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
