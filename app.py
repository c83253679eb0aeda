# app.py
import io
import logging
import zipfile
from pathlib import Path

from flask import Flask, jsonify, request, send_file

from config import Config
from pdf_service import (
    INVOICE,
    PURCHASE_ORDER,
    QUOTATION,
    generate_pdf,
    store_pdf,
    stored_pdfs,
)

logger = logging.getLogger(__name__)


def _wants_store() -> bool:
    return (request.args.get("store") or "").strip().lower() in ("1", "true", "yes")


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object.")
    return payload


def create_app(config_overrides: dict | None = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    Path(app.config["EXPORTS_DIR"]).mkdir(parents=True, exist_ok=True)

    def _render(kind: str, document_type: str | None = None):
        payload = _json_payload()
        exports_dir = app.config["EXPORTS_DIR"]
        assets_dir = app.config["ASSETS_DIR"]

        filename, data = generate_pdf(kind, payload, document_type, assets_dir=assets_dir)
        if _wants_store():
            store_pdf(kind, filename, data, exports_dir)

        return send_file(
            io.BytesIO(data),
            as_attachment=True,
            download_name=filename,
            mimetype="application/pdf",
        )

    # -----------------------------
    # Errors
    # -----------------------------
    @app.errorhandler(ValueError)
    def bad_request(e):
        # bad template key, bad document type, malformed body
        logger.warning("Rejected PDF request: %s", e)
        return jsonify({"error": str(e)}), 400

    # -----------------------------
    # PDF routes
    # -----------------------------
    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/invoices/pdf", methods=["POST"])
    def invoice_pdf():
        document_type = (request.args.get("type") or "").strip() or None
        return _render(INVOICE, document_type)

    @app.route("/api/purchase-orders/pdf", methods=["POST"])
    def purchase_order_pdf():
        return _render(PURCHASE_ORDER)

    @app.route("/api/quotations/pdf", methods=["POST"])
    def quotation_pdf():
        return _render(QUOTATION)

    @app.route("/pdfs/download_all")
    def pdfs_download_all():
        kind = (request.args.get("kind") or "").strip() or None
        paths = stored_pdfs(kind, app.config["EXPORTS_DIR"])

        mem = io.BytesIO()
        with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as z:
            for path in paths:
                z.write(path, arcname=f"{path.parent.name}/{path.name}")

        mem.seek(0)
        download_name = f"{kind}_pdfs.zip" if kind else "document_pdfs.zip"
        return send_file(mem, as_attachment=True, download_name=download_name, mimetype="application/zip")

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
