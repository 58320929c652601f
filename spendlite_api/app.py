"""Flask REST API exposing the Spendlite ledger."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from spendlite.aggregation import category_names, category_totals, monthly_series, summary
from spendlite.config import Settings
from spendlite.csv_codec import CSV_MIME_TYPE, EXPORT_FILENAME
from spendlite.exceptions import (
    MissingColumnsError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from spendlite.filters import sort_recent_first
from spendlite.logging_setup import configure_logging
from spendlite.models import FilterSpec
from spendlite.storage import JSONStorage
from spendlite.store import TransactionStore


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    app = Flask(__name__)

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": list(settings.allowed_origins)}}, supports_credentials=True)
    else:
        CORS(app)

    store = TransactionStore(JSONStorage(Path(data_dir or settings.data_dir)))
    app.extensions["spendlite_store"] = store

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(MissingColumnsError)
    def handle_missing_columns(exc: MissingColumnsError):
        app.logger.error("Import failed: %s", exc)
        return jsonify({"error": "Import failed", "details": str(exc), "missing": list(exc.missing)}), 400

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _filters() -> FilterSpec:
        return FilterSpec.from_params(
            kind=request.args.get("type"),
            category=request.args.get("category"),
            date_from=request.args.get("start"),
            date_to=request.args.get("end"),
            search_text=request.args.get("search"),
        )

    @app.get("/transactions")
    def list_transactions():
        records = store.list(_filters())
        return _success({
            "items": [record.to_dict() for record in sort_recent_first(records)],
            "summary": summary(records).to_dict(),
        })

    @app.post("/transactions")
    def create_transaction():
        transaction = store.add(_json_body())
        return _success(transaction.to_dict(), 201)

    @app.get("/transactions/<transaction_id>")
    def get_transaction(transaction_id: str):
        return _success(store.get(transaction_id).to_dict())

    @app.put("/transactions/<transaction_id>")
    def update_transaction(transaction_id: str):
        transaction = store.update(transaction_id, _json_body())
        return _success(transaction.to_dict())

    @app.delete("/transactions/<transaction_id>")
    def delete_transaction(transaction_id: str):
        store.delete(transaction_id)
        return _success({}, 204)

    @app.get("/summary")
    def get_summary():
        return _success(summary(store.list(_filters())).to_dict())

    @app.get("/series/monthly")
    def get_monthly_series():
        buckets = monthly_series(store.list(_filters()))
        return _success({"items": [bucket.to_dict() for bucket in buckets]})

    @app.get("/series/categories")
    def get_category_series():
        totals = category_totals(store.list(_filters()))
        return _success({"items": [item.to_dict() for item in totals]})

    @app.get("/categories")
    def list_categories():
        return _success({"items": category_names(store.list(_filters()))})

    @app.get("/export")
    def export_csv():
        return Response(
            store.export_csv(),
            content_type=CSV_MIME_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    @app.post("/import")
    def import_csv():
        if request.mimetype == "multipart/form-data":
            upload = request.files.get("file")
            if upload is None:
                raise ValidationError("Multipart import requires a 'file' field")
            text = upload.read().decode("utf-8-sig")
        else:
            text = request.get_data(as_text=True)
        if not text.strip():
            raise ValidationError("Import requires CSV text or a 'file' upload")
        count = store.import_csv(text)
        return _success({"imported": count})

    @app.post("/sample")
    def load_sample():
        sample = store.load_sample()
        return _success({"items": [transaction.to_dict() for transaction in sample]}, 201)

    return app
