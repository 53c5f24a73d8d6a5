"""REST backend for Swedish lifetime finance projections."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from lifeplan.data_model import (
    DEFAULT_CONFIG,
    DEFAULT_INPUTS,
    PENSION_ACCOUNT_TEMPLATES,
    config_from_payload,
    get_parameters,
    inputs_from_payload,
    load_parameters_from_env,
)
from lifeplan.engine import compute_yearly_tax, run_request, tax_summary
from lifeplan.engine.aggregate import milestone_rows, projections_to_frame
from lifeplan.engine.runner import GENERIC_ERROR
from lifeplan.engine.sanitize import sanitize_json_compat

logger = logging.getLogger(__name__)

app = Flask(__name__)


def _sanitize_records(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [sanitize_json_compat(row) for row in records]


def _parameters_for_request():
    year = request.args.get("year")
    if year:
        return get_parameters(int(year))
    return load_parameters_from_env()


@app.after_request
def apply_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@app.get("/api/health")
def healthcheck():
    return jsonify({"status": "ok"})


@app.get("/api/defaults")
def get_defaults():
    return jsonify(
        {
            "inputs": asdict(DEFAULT_INPUTS),
            "config": asdict(DEFAULT_CONFIG),
            "pensionTemplates": PENSION_ACCOUNT_TEMPLATES,
        }
    )


@app.get("/api/parameters")
def get_parameter_table():
    try:
        params = _parameters_for_request()
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 404
    return jsonify(sanitize_json_compat(asdict(params)))


@app.post("/api/tax")
def calculate_tax():
    payload = request.get_json(silent=True) or {}
    try:
        params = _parameters_for_request()
        gross = float(payload.get("grossSalary", payload.get("gross_salary", 0.0)) or 0.0)
        age = int(payload.get("age", 0))
        isk = float(payload.get("iskCapital", payload.get("isk_balance", 0.0)) or 0.0)
        kf = float(payload.get("kfCapital", payload.get("kf_balance", 0.0)) or 0.0)
        gains = payload.get("capitalGains", payload.get("capital_gains"))
        gains = None if gains is None else float(gains)
    except (TypeError, ValueError) as exc:
        return jsonify({"error": f"Invalid tax parameters: {exc}"}), 400

    result = compute_yearly_tax(gross, age, isk, kf, gains, params)
    return jsonify(
        sanitize_json_compat(
            {
                "result": asdict(result),
                "summary": tax_summary(gross, age, isk, kf, gains, params),
            }
        )
    )


@app.post("/api/simulate")
def simulate():
    payload = request.get_json(silent=True) or {}
    try:
        params = _parameters_for_request()
        every = int(request.args.get("every", 0) or 0)
        inputs = inputs_from_payload(payload.get("inputs", payload))
        config = config_from_payload(payload.get("config"))
    except (KeyError, TypeError, ValueError) as exc:
        logger.info("Rejected simulation payload: %s", exc)
        return jsonify({"error": f"Invalid simulation input: {exc}"}), 400

    result = run_request(inputs, config, params)
    if not result.is_valid:
        status = 500 if result.errors == [GENERIC_ERROR] else 400
        return jsonify({"errors": result.errors, "warnings": result.warnings, "projections": []}), status

    df = projections_to_frame(result.projections)
    if every:
        df = milestone_rows(df, every)

    body = {
        "projections": _sanitize_records(df.to_dict(orient="records")),
        "summary": sanitize_json_compat(asdict(result.summary)),
        "warnings": result.warnings,
        "errors": [],
        "coercions": result.coercions,
    }
    if config.enable_transparency:
        years = set(df["Year"].tolist())
        body["taxBreakdown"] = [
            sanitize_json_compat([asdict(calc) for calc in p.tax_breakdown or ()])
            for p in result.projections
            if p.year in years
        ]
    return jsonify(body)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False, port=8000)
