"""FamilyHub Server Configuration."""

import secrets
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "FamilyHub"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Paths
    data_dir: Path = Path.home() / "familyhub" / "data"

    # Database
    db_path: Path = Path.home() / "familyhub" / "data" / "familyhub.db"

    # Sessions
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    session_expire_days: int = 30
    bcrypt_rounds: int = 12

    # Chores
    timezone: str = ""  # IANA name for daily cooldowns, empty = server local time
    undo_window_seconds: int = 300  # 0 = undo always allowed

    model_config = {"env_prefix": "FAMILYHUB_"}

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)

    def ensure_secrets(self) -> None:
        """Generate the session signing secret if not set, persist it so sessions survive restarts."""
        secrets_file = self.data_dir / ".secrets"
        saved = {}
        if secrets_file.exists():
            for line in secrets_file.read_text().strip().splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    saved[k.strip()] = v.strip()

        if not self.jwt_secret:
            self.jwt_secret = saved.get("jwt_secret", "") or secrets.token_urlsafe(32)

        secrets_file.write_text(f"jwt_secret={self.jwt_secret}\n")


settings = Settings()
settings.ensure_dirs()
settings.ensure_secrets()
