import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budgetpay.config import Settings
from budgetpay.database import Store, migrate


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())
    store = Store(settings)
    print(f"Database URL: {store.open().url.render_as_string(hide_password=True)}")
    try:
        migrate(store)
        print("Done.")
    finally:
        store.close()


if __name__ == "__main__":
    main()
