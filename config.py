# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, "") or default)
    except ValueError:
        return float(default)


class Config:
    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-change-me")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Generated PDFs written by ?store=1 and the bulk script
    EXPORTS_DIR = os.getenv("EXPORTS_DIR", (BASE_DIR / "exports").as_posix())

    # Static images (paktech-logo.png, signature.png, ...) the layouts draw
    ASSETS_DIR = os.getenv("ASSETS_DIR", (BASE_DIR / "static" / "images").as_posix())

    # 0 keeps content streams readable, handy when diffing output
    PDF_PAGE_COMPRESSION = int(os.getenv("PDF_PAGE_COMPRESSION", "1"))

    # Bottom margin (mm) reserved per layout.
    # Paktech quotations print on letterhead with a 1.8in footer.
    QUOTATION_PAKTECH_BOTTOM_MARGIN_MM = _env_float("QUOTATION_PAKTECH_BOTTOM_MARGIN_MM", 45.72)
    QUOTATION_TECHNO_BOTTOM_MARGIN_MM = _env_float("QUOTATION_TECHNO_BOTTOM_MARGIN_MM", 17.0)
    PURCHASE_ORDER_BOTTOM_MARGIN_MM = _env_float("PURCHASE_ORDER_BOTTOM_MARGIN_MM", 20.0)
    INVOICE_BOTTOM_MARGIN_MM = _env_float("INVOICE_BOTTOM_MARGIN_MM", 20.0)
