from flask import Blueprint, jsonify
from roletrando.services import get_services

ranking_api = Blueprint('ranking_api', __name__)


def _ranking():
    services = get_services()
    if not services.loaded:
        services.load()
    return services.ranking


@ranking_api.route('/top3', methods=['GET'])
def top3():
    return jsonify([entry._asdict() for entry in _ranking().top3()])


@ranking_api.route('/<string:username>', methods=['GET'])
def user_highscore(username):
    return jsonify({
        'username': username,
        'highscore': _ranking().highscore_of(username),
    })
