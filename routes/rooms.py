from flask import Blueprint, jsonify

from services.rooms import list_rooms
from utils.auth_context import login_required

room_bp = Blueprint("rooms", __name__, url_prefix="/rooms")


@room_bp.get("")
@login_required
def get_rooms():
    return jsonify([r.to_dict() for r in list_rooms()]), 200
