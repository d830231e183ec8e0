"""
Park Sync - Sync Trigger Endpoints
HTTP triggers for the crowd import, park sync and weather jobs, plus
crowd prediction statistics and per-job sync status for operators.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from ...scripts.import_crowd_calendar import valid_year_range, validate_year
from ...scripts.sync_parks import build_sync_dates
from ...utils.logger import logger

sync_bp = Blueprint('sync', __name__)


def _container():
    return current_app.extensions['parksync']


def _request_params() -> Dict[str, Any]:
    """JSON body merged over query string parameters."""
    params: Dict[str, Any] = dict(request.args.items())
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        params.update(body)
    return params


def _bad_request(message: str):
    logger.warning(f"Rejected sync request: {message}")
    return jsonify({"success": False, "error": message}), 400


@sync_bp.route('/import-thrill-data', methods=['POST'])
def import_thrill_data():
    """
    Import a year of crowd predictions for every park.

    Body:
        year: Calendar year (default: current year)

    Response:
        200 OK: Run summary (success may be false if every park failed)
        400 Bad Request: Year missing range or not an integer
    """
    current_year = datetime.now(timezone.utc).year
    params = _request_params()
    year = params.get('year', current_year)
    if isinstance(year, str) and year.strip().lstrip('-').isdigit():
        year = int(year)

    try:
        year = validate_year(year, current_year)
    except ValueError as e:
        low, high = valid_year_range(current_year)
        logger.warning(f"Invalid import year {year!r} (allowed {low}-{high})")
        return _bad_request(str(e))

    summary = _container().crowd_importer().run(year)
    response = summary.to_dict()
    response['year'] = year
    response['simulated'] = _container().simulated
    return jsonify(response), 200


@sync_bp.route('/manual-sync', methods=['GET', 'POST'])
def manual_sync():
    """
    Sync live data and schedules for every park.

    Parameters (query string or JSON body):
        days: Number of days from today, 1-90 (default 7)
        start_date, end_date: Explicit inclusive window (YYYY-MM-DD)
    """
    params = _request_params()
    days = params.get('days')
    if isinstance(days, str):
        try:
            days = int(days)
        except ValueError:
            return _bad_request("days must be an integer")

    try:
        dates = build_sync_dates(days=days,
                                 start_date=params.get('start_date'),
                                 end_date=params.get('end_date'))
    except ValueError as e:
        return _bad_request(str(e))

    summary = _container().park_sync_job().run(dates)
    response = summary.to_dict()
    response.update({
        'attractionsCount': summary.counts.get('attractions', 0),
        'entertainmentCount': summary.counts.get('entertainment', 0),
        'schedulesCount': summary.counts.get('schedules', 0),
        'eventsCount': summary.counts.get('events', 0),
        'results': summary.results,
        'requestedRange': {'start': dates[0].isoformat(), 'end': dates[-1].isoformat()},
        'simulated': _container().simulated,
    })
    return jsonify(response), 200


@sync_bp.route('/fetch-weather', methods=['POST'])
def fetch_weather():
    """Fetch, aggregate and store the daily weather forecast."""
    container = _container()
    summary = container.weather_job().run()

    response = summary.to_dict()
    del response['parksProcessed']
    response.update({
        'forecasts': summary.results,
        'location': container.weather_location.name,
        'staleDeleted': summary.counts.get('stale_deleted', 0),
        'simulated': container.simulated,
    })
    return jsonify(response), 200


@sync_bp.route('/crowd-predictions/stats', methods=['GET'])
def crowd_prediction_stats():
    """Totals, date range, average crowd level and per-park counts."""
    stats = _container().crowd_repository.get_stats()
    return jsonify({"success": True, "stats": stats}), 200


@sync_bp.route('/sync-status', methods=['GET'])
def sync_status():
    """Run counters, last sync and last error for every job that has run."""
    services = _container().sync_status_repository.get_all()
    return jsonify({"success": True, "services": services}), 200
