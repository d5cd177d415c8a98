from __future__ import annotations

from pathlib import Path

from flask import Flask
from dotenv import load_dotenv

from config.settings import get_settings
from models import init_db

_ENV_LOADED = False


def _ensure_env_loaded() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    base_dir = Path(__file__).resolve().parent.parent
    env_path = base_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
    else:
        load_dotenv(override=True)

    _ENV_LOADED = True


def create_app() -> Flask:
    _ensure_env_loaded()
    settings = get_settings()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.SECRET_KEY
    app.json.sort_keys = False

    init_db()

    from .routes import bp as core_bp

    app.register_blueprint(core_bp)

    return app
