import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # Data file settings
    data_dir: str = os.getenv("SHELF_DATA_DIR", ".")
    items_file: str = os.getenv("SHELF_ITEMS_FILE", "items.csv")
    members_file: str = os.getenv("SHELF_MEMBERS_FILE", "members.csv")

    # Catalog behaviour
    loan_days: int = int(os.getenv("SHELF_LOAN_DAYS", "14"))
    member_id_start: int = int(os.getenv("SHELF_MEMBER_ID_START", "1001"))
    seed_defaults: bool = _env_bool("SHELF_SEED_DEFAULTS", "true")

    # Logging
    log_level: str = os.getenv("SHELF_LOG_LEVEL", "WARNING")

    @property
    def items_path(self) -> Path:
        return Path(self.data_dir) / self.items_file

    @property
    def members_path(self) -> Path:
        return Path(self.data_dir) / self.members_file


settings = Settings()
