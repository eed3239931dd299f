from flask import Blueprint, jsonify

from roshambo.models import Choice, Outcome
from roshambo.services.game.rules import HISTORY_LABELS, RESULT_MESSAGES, RULES, beats

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Roshambo game server!'})

@main.route('/api/rules')
def rules():
    return jsonify({
        'choices': [
            {'choice': c.value, 'beats': beats(c).value, 'description': RULES[c]}
            for c in Choice
        ],
        'results': {o.value: RESULT_MESSAGES[o] for o in Outcome},
        'history_labels': {o.value: HISTORY_LABELS[o] for o in Outcome},
    })
