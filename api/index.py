"""
Flask App - Fax CDR Service

The fax session engine posts here once a transmission or reception has
finished. Each request produces exactly one CDR, written to the xferfaxlog
file and the CDR database when they are configured.

Endpoints:
  GET  /api/health              - Health check (xferfaxlog + database)
  GET  /api/setup-db            - Create database tables (run once)
  POST /api/fax/sent            - Record a finished transmission
  POST /api/fax/received        - Record a finished reception
"""

import sys
import os
import logging
from datetime import datetime

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask import Flask, request, jsonify

from config import get_config

app = Flask(__name__)

logging.basicConfig(level=getattr(logging, get_config().LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)


@app.route('/api/health', methods=['GET'])
def health():
    """Health check - reports which sinks are configured and reachable."""
    from services.cdr_service import get_cdr_service
    cdr = get_cdr_service()

    result = {
        "status": "healthy",
        "xferfaxlog": "ok" if cdr.file_writer.enabled else "disabled",
        "database": "disabled",
        "timestamp": datetime.utcnow().isoformat(),
    }

    if cdr.db_writer.enabled:
        try:
            from sqlalchemy import text
            engine = cdr.db_writer.get_db_engine()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            result["database"] = "ok"
        except Exception as e:
            result["database"] = f"error: {str(e)}"
            result["status"] = "unhealthy"

    status_code = 200 if result["status"] == "healthy" else 503
    return jsonify(result), status_code


@app.route('/api/setup-db', methods=['GET'])
def setup_db():
    """Create database tables. Run once after configuring the database."""
    from services.cdr_service import get_cdr_service
    cdr = get_cdr_service()
    if not cdr.db_writer.enabled:
        return jsonify({"error": "CDR database not configured"}), 400

    try:
        from models import init_db
        init_db(cdr.db_writer.get_db_engine())
        return jsonify({"message": "Tables created successfully"})
    except Exception as e:
        logger.error(f"setup-db error: {e}")
        return jsonify({"error": str(e)}), 500


@app.route('/api/fax/sent', methods=['POST'])
def fax_sent():
    """Session engine calls this when a transmission has finished."""
    return _record_fax('SEND')


@app.route('/api/fax/received', methods=['POST'])
def fax_received():
    """Session engine calls this when a reception has finished."""
    return _record_fax('RECV')


def _record_fax(direction):
    from models.fax_result import FaxResult
    from services.cdr_service import get_cdr_service

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON body required"}), 400

    try:
        result = FaxResult.from_dict(data, direction=direction)
    except (ValueError, TypeError) as e:
        logger.warning(f"Rejected {direction} result: {e}")
        return jsonify({"error": str(e)}), 400

    logger.info(f"{direction}: CommID={result.comm_id}, Pages={result.transferred_pages}")

    outcome = get_cdr_service().record(result)
    status_code = 200 if outcome.ok else 502
    return jsonify(outcome.to_dict()), status_code


@app.route('/', methods=['GET'])
@app.route('/api', methods=['GET'])
def index():
    """Root info page."""
    return jsonify({
        "app": "Fax CDR Service",
        "status": "running",
        "endpoints": {
            "GET /api/health": "Health check (xferfaxlog + database)",
            "GET /api/setup-db": "Create database tables (run once)",
            "POST /api/fax/sent": "Record a finished transmission",
            "POST /api/fax/received": "Record a finished reception",
        }
    })


# For local development
if __name__ == '__main__':
    app.run(debug=get_config().FLASK_DEBUG, port=5000)
