from flask import Blueprint, jsonify, request, current_app, abort
from roshambo import get_registry
from roshambo.models import InvalidChoiceError
from roshambo.services.game import SessionNotFound


sessions = Blueprint('sessions', __name__)


def _session_or_404(session_code):
    try:
        return get_registry().get(session_code)
    except SessionNotFound:
        abort(404)


def _state_payload(session_code, session):
    payload = session.to_dict()
    payload['session_code'] = session_code.upper()
    # Lets clients size their "thinking" indicator
    payload['thinking_delay'] = session.thinking_delay
    return payload


@sessions.errorhandler(404)
def session_not_found(_err):
    return jsonify({'error': 'Session not found'}), 404


@sessions.route('/create', methods=['POST'])
def create_session():
    code, session = get_registry().create()
    return jsonify({
        'message': 'New session created!',
        'session_code': code,
        'state': _state_payload(code, session),
    }), 201


@sessions.route('/<string:session_code>/state', methods=['GET'])
def get_session_state(session_code):
    session = _session_or_404(session_code)
    return jsonify(_state_payload(session_code, session))


@sessions.route('/<string:session_code>/choice', methods=['POST'])
def select_choice(session_code):
    data = request.get_json(silent=True)
    if data is not None and not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    choice = (data or {}).get('choice')
    if not choice:
        return jsonify({'error': 'choice is required'}), 400

    session = _session_or_404(session_code)
    try:
        ticket = session.select_choice(choice)
    except InvalidChoiceError as exc:
        return jsonify({'error': str(exc)}), 400

    payload = _state_payload(session_code, session)
    payload['accepted'] = ticket is not None
    return jsonify(payload)


@sessions.route('/<string:session_code>/new-game', methods=['POST'])
def new_game(session_code):
    session = _session_or_404(session_code)
    session.new_game()
    return jsonify(_state_payload(session_code, session))


@sessions.route('/<string:session_code>/reset-score', methods=['POST'])
def reset_score(session_code):
    session = _session_or_404(session_code)
    session.reset_score()
    return jsonify(_state_payload(session_code, session))


@sessions.route('/<string:session_code>', methods=['DELETE'])
def end_session(session_code):
    if not get_registry().end(session_code):
        return jsonify({'error': 'Session not found'}), 404
    try:
        from roshambo.socketio_events import notify_session_ended
        notify_session_ended(session_code.upper())
    except Exception as exc:
        current_app.logger.warning(f"[session-end] notify failed: {exc}")
    return jsonify({'ended': session_code.upper()})
