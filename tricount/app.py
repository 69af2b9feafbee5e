from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from .balances import compute_all_balances, split_expense
from .config import config
from .errors import TricountError
from .models import Group
from .serializers import (
    balance_from_payload,
    balance_to_dict,
    debt_to_dict,
    expense_from_payload,
    group_from_payload,
    list_payload,
    payment_from_payload,
    suggestion_to_dict,
)
from .settlements import suggest_settlements

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["DEBUG"] = config.DEBUG

    CORS(app, resources={r"/api/*": {"origins": config.CORS_ORIGINS}})

    register_error_handlers(app)
    register_routes(app)
    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def bad_request(exc: BadRequest):
        logger.info("Rejected payload: %s", exc.description)
        return jsonify({"error": "invalid_payload", "message": exc.description}), 400

    @app.errorhandler(TricountError)
    def cannot_compute(exc: TricountError):
        logger.info("Cannot compute balances: %s", exc)
        return jsonify({"error": exc.code, "message": str(exc)}), 400


def register_routes(app: Flask) -> None:
    @app.get("/api")
    def health_check():
        return jsonify({"status": "healthy"})

    @app.post("/api/balances")
    def get_balances():
        payload = _json_body()
        try:
            groups = _groups_from_payload(payload)
            expenses = [expense_from_payload(item) for item in list_payload(payload, "expenses")]
            payments = [payment_from_payload(item) for item in list_payload(payload, "payments")]
        except ValueError as exc:
            raise BadRequest(str(exc)) from None

        # Duplicate group ids surface as ValueError, everything else is a TricountError.
        try:
            balances = compute_all_balances(groups, expenses, payments)
        except TricountError:
            raise
        except ValueError as exc:
            raise BadRequest(str(exc)) from None

        settlements = suggest_settlements(balances)
        return jsonify(
            {
                "balances": [balance_to_dict(balance) for balance in balances],
                "settlements": [suggestion_to_dict(suggestion) for suggestion in settlements],
            }
        )

    @app.post("/api/settlements")
    def get_settlements():
        payload = _json_body()
        try:
            balances = [balance_from_payload(item) for item in list_payload(payload, "balances")]
        except ValueError as exc:
            raise BadRequest(str(exc)) from None

        settlements = suggest_settlements(balances)
        return jsonify({"settlements": [suggestion_to_dict(suggestion) for suggestion in settlements]})

    @app.post("/api/expenses/split")
    def get_expense_split():
        payload = _json_body()
        item = payload.get("expense")
        if not isinstance(item, Mapping):
            raise BadRequest("invalid_expense_payload")
        try:
            expense = expense_from_payload(item)
        except ValueError as exc:
            raise BadRequest(str(exc)) from None

        return jsonify(debt_to_dict(split_expense(expense)))


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequest("request body must be a JSON object")
    return payload


def _groups_from_payload(payload: Mapping[str, Any]) -> List[Group]:
    if "group" in payload:
        if not isinstance(payload["group"], Mapping):
            raise ValueError("invalid_group_payload")
        return [group_from_payload(payload["group"])]
    return [group_from_payload(item) for item in list_payload(payload, "groups")]


app = create_app()


if __name__ == "__main__":
    app.run(debug=config.DEBUG, port=config.PORT)
