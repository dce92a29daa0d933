from flask import Flask, request, jsonify
import threading

import config
from core import ConfigurationError, InvalidTransitionError, PersistenceError
from session import MeetingSession
from storage import SnapshotStore
from app_logging import logging

logger = logging.getLogger(__name__)

app = Flask(__name__)

# --- SERVER STATE ---
settings = dict(config.INITIAL_SETTINGS)
store = SnapshotStore(config.STATE_FILE)

session = None
latest_display = None
_session_lock = threading.Lock()


def _on_display(info):
    """Display refresh from the session. Only stores the latest state for polling clients."""
    global latest_display
    latest_display = info


def _current_session():
    with _session_lock:
        return session


def _no_session():
    return jsonify({'success': False, 'error': 'No meeting in progress.'}), 404


# --- API ENDPOINTS ---

@app.route('/api/session', methods=['POST'])
def create_session():
    """Endpoint to start a meeting, or resume the interrupted one."""
    global session, latest_display
    data = request.get_json(silent=True) or {}
    try:
        meeting_length = int(data.get('meeting_length', 0))
        participants = int(data.get('participants', 0))
    except (TypeError, ValueError):
        return jsonify({'success': False, 'error': 'Invalid request format.'}), 400

    with _session_lock:
        if session is not None and not session.ended:
            return jsonify({'success': False, 'error': 'A meeting is already in progress.'}), 409

        try:
            new_session = MeetingSession.create(
                meeting_length,
                participants,
                settings['warning_time'],
                store,
                interval=config.TICK_INTERVAL_SECONDS,
                sounds_enabled=lambda: settings['sounds_enabled'],
            )
        except ConfigurationError as e:
            logger.warning("Rejected session config: %s", e)
            return jsonify({'success': False, 'error': str(e)}), 400

        new_session.add_listener(_on_display)
        session = new_session
        latest_display = new_session.display()

    new_session.resume()
    return jsonify({'success': True, 'state': latest_display})


@app.route('/api/state', methods=['GET'])
def get_state():
    """Endpoint for the clients to poll the current meeting state."""
    if _current_session() is None or latest_display is None:
        return _no_session()
    return jsonify(latest_display)


@app.route('/api/next', methods=['POST'])
def next_participant():
    """Endpoint to hand over to the next participant."""
    current = _current_session()
    if current is None or current.ended:
        return _no_session()
    still_active = current.advance_participant()
    return jsonify({'success': True, 'individual_active': still_active, 'state': latest_display})


@app.route('/api/finish', methods=['POST'])
@app.route('/api/exit', methods=['POST'])
def finish_meeting():
    """Endpoint to end the meeting, whatever phase it is in."""
    current = _current_session()
    if current is None:
        return _no_session()
    try:
        current.finish()
    except PersistenceError as e:
        return jsonify({'success': False, 'error': str(e)}), 500
    return jsonify({'success': True, 'message': 'Meeting finished.', 'state': latest_display})


@app.route('/api/suspend', methods=['POST'])
def suspend_meeting():
    """Endpoint to interrupt the meeting. The counters are saved for a later resume."""
    current = _current_session()
    if current is None or current.ended:
        return _no_session()
    try:
        current.suspend()
    except PersistenceError as e:
        return jsonify({'success': False, 'error': str(e)}), 500
    return jsonify({'success': True, 'message': 'Meeting suspended.', 'state': latest_display})


@app.route('/api/resume', methods=['POST'])
def resume_meeting():
    """Endpoint to continue an interrupted meeting."""
    current = _current_session()
    if current is None:
        return _no_session()
    try:
        current.resume()
    except InvalidTransitionError as e:
        return jsonify({'success': False, 'error': str(e)}), 409
    return jsonify({'success': True, 'message': 'Meeting resumed.', 'state': latest_display})


@app.route('/api/settings', methods=['GET', 'POST'])
def update_settings():
    """Endpoint to read or change the warning time and the sound toggle."""
    if request.method == 'GET':
        return jsonify(settings)

    data = request.get_json(silent=True) or {}
    try:
        if 'warning_time' in data:
            warning_time = int(data['warning_time'])
            if warning_time < 0:
                return jsonify({'success': False, 'error': 'Warning time must not be negative.'}), 400
            settings['warning_time'] = warning_time
        if 'sounds_enabled' in data:
            settings['sounds_enabled'] = bool(data['sounds_enabled'])
    except (TypeError, ValueError):
        return jsonify({'success': False, 'error': 'Invalid request format.'}), 400

    return jsonify({'success': True, **settings})


if __name__ == '__main__':
    try:
        app.run(host=config.HOST, port=config.PORT)
    finally:
        current = _current_session()
        if current is not None and not current.ended:
            try:
                current.suspend()
            except PersistenceError as e:
                logger.error("Meeting state lost on shutdown: %s", e)
