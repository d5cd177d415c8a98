import logging
from pathlib import Path

from dotenv import load_dotenv

base_dir = Path(__file__).resolve().parent
env_path = base_dir / ".env"
if env_path.exists():
    load_dotenv(env_path, override=True)
else:
    load_dotenv(override=True)

from app import create_app  # noqa: E402
from config.settings import get_settings  # noqa: E402

app = create_app()

if __name__ == "__main__":
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    app.run(host="127.0.0.1", port=5001, debug=True)
