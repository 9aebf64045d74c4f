"""
Web Viewer - Browser front end for a LiteView session

A single page that lets the user:
- Upload a .db / .sqlite / .sqlite3 file into memory
- Pick a table to prefill a SELECT query
- Run SQL and see rows, an informational notice, or the error
- Download the modified database

Run:
    pip install flask
    python -m liteview --web

Then visit: http://localhost:5000
"""

import io
import logging

from flask import Flask, render_template, request, redirect, url_for, flash, jsonify, send_file

from ..core.errors import LiteViewError, NoActiveSession
from ..core.executor import Rows, Empty
from ..core.session import Session, ErrorMessage
from ..storage.files import is_supported_filename, DATABASE_EXTENSIONS

log = logging.getLogger(__name__)

SESSION_KEY = "liteview.session"

DEFAULT_CONFIG = {
    'SECRET_KEY': 'liteview-dev-secret-key-change-in-production',
    'MAX_CONTENT_LENGTH': 256 * 1024 * 1024,
    'ALLOWED_EXTENSIONS': DATABASE_EXTENSIONS,
    'DOWNLOAD_NAME': 'database.sqlite',
}


def create_app(config=None, session=None):
    """
    Build the web viewer application.

    Args:
        config: Optional mapping applied after defaults and LITEVIEW_* env vars
        session: Session to serve (a new empty one by default)

    Returns:
        Flask application
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env("LITEVIEW")
    if config:
        app.config.update(config)

    app.extensions[SESSION_KEY] = session if session is not None else Session()

    register_routes(app)
    return app


def get_session(app) -> Session:
    return app.extensions[SESSION_KEY]


def outcome_to_json(item):
    """JSON body for a display item; 'kind' keeps the three outcomes apart"""
    if isinstance(item, Rows):
        return {
            'kind': 'rows',
            'columns': list(item.columns),
            'values': [list(row) for row in item.rendered()],
        }
    if isinstance(item, Empty):
        return {'kind': 'empty', 'message': item.message}
    if isinstance(item, ErrorMessage):
        return {'kind': 'error', 'message': item.message}
    return {'kind': 'none'}


def register_routes(app):

    def render_page(query="", selected=""):
        session = get_session(app)
        item = session.display()
        return render_template(
            'index.html',
            loaded=session.is_loaded,
            tables=session.current_tables(),
            selected_table=selected,
            query=query,
            rows=item if isinstance(item, Rows) else None,
            notice=item.message if isinstance(item, Empty) else None,
            error=item.text if isinstance(item, ErrorMessage) else None,
            accept=",".join(app.config['ALLOWED_EXTENSIONS']),
        )

    @app.route('/')
    def index():
        """Main page."""
        return render_page()

    @app.route('/open', methods=['POST'])
    def open_database():
        """Load an uploaded database file into the session."""
        upload = request.files.get('database')
        if upload is None or not upload.filename:
            flash('Please choose a database file.', 'error')
            return redirect(url_for('index'))

        if not is_supported_filename(upload.filename, app.config['ALLOWED_EXTENSIONS']):
            flash(f'Unsupported file type: {upload.filename}', 'error')
            return redirect(url_for('index'))

        try:
            snapshot = get_session(app).load_from_bytes(upload.read())
        except LiteViewError as e:
            # The previously loaded database stays in place
            flash(e.display_text(), 'error')
            return redirect(url_for('index'))

        log.info("Opened upload %s", upload.filename)
        flash(f'Loaded {upload.filename} ({len(snapshot.tables)} table(s)).', 'success')
        return redirect(url_for('index'))

    @app.route('/tables/<path:name>')
    def select_table(name):
        """Prefill the editor with a query for the selected table."""
        session = get_session(app)
        if not session.is_loaded:
            flash(NoActiveSession().display_text(), 'error')
            return redirect(url_for('index'))
        return render_page(query=session.prefill_query(name), selected=name)

    @app.route('/query', methods=['POST'])
    def run_query():
        """Execute the statement from the editor."""
        sql = request.form.get('query', '')
        try:
            get_session(app).execute(sql)
        except NoActiveSession as e:
            flash(e.display_text(), 'error')
        except LiteViewError:
            # Recorded on the session and shown by render_page
            pass
        return render_page(query=sql)

    @app.route('/save')
    def save_database():
        """Download the in-memory database."""
        try:
            data = get_session(app).export_bytes()
        except LiteViewError as e:
            flash(e.display_text(), 'error')
            return redirect(url_for('index'))

        return send_file(
            io.BytesIO(data),
            mimetype='application/vnd.sqlite3',
            as_attachment=True,
            download_name=app.config['DOWNLOAD_NAME'],
        )

    @app.route('/api/tables')
    def api_tables():
        """API endpoint listing the tables found at load time."""
        session = get_session(app)
        return jsonify({
            'loaded': session.is_loaded,
            'tables': list(session.current_tables()),
        })

    @app.route('/api/query', methods=['POST'])
    def api_query():
        """API endpoint executing one statement."""
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return jsonify({'kind': 'error', 'message': "request body must be a JSON object"}), 400
        sql = payload.get('sql', '')
        if not isinstance(sql, str):
            return jsonify({'kind': 'error', 'message': "'sql' must be a string"}), 400

        session = get_session(app)
        try:
            outcome = session.execute(sql)
        except NoActiveSession as e:
            return jsonify({'kind': 'error', 'message': e.message}), 409
        except LiteViewError as e:
            return jsonify({'kind': 'error', 'message': e.message}), 400

        if outcome is None:
            return jsonify({'kind': 'none'})
        return jsonify(outcome_to_json(outcome))
