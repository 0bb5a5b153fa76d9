# app.py
import logging

from flask import Flask, request, jsonify

from catalog import HotelCatalog, Outcome
from models import (
    BILLING_POLICIES,
    HotelError,
    Reservation,
    ReservationDetails,
    Room,
    RoomCategory,
    billing_policy_for,
    to_money,
)

app = Flask(__name__)
app.config.from_mapping(
    SECRET_KEY="dev-secret",
    DEBUG=False,
)
app.config.from_prefixed_env()

# In-memory storage, discarded on exit
catalog = HotelCatalog()

STATUS_FOR = {
    Outcome.OK: 200,
    Outcome.NOT_FOUND: 404,
    Outcome.CAPACITY_EXCEEDED: 400,
    Outcome.UNAVAILABLE: 400,
}


# Helper functions
def money_text(amount) -> str:
    return f"{amount:.2f}"


def room_to_dict(r: Room) -> dict:
    return {
        "room_number": r.room_number,
        "category": r.category_name,
        "rate": money_text(r.rate),
        "billing_policy": r.policy_name,
        "max_guests": r.max_guests,
        "available": r.available,
    }


def reservation_to_dict(res: Reservation) -> dict:
    return {
        "reservation_id": res.reservation_id,
        "name": res.name,
        "contact": res.contact,
        "room_number": res.room_number,
        "check_in": res.check_in,
        "check_out": res.check_out,
        "guests": res.guests,
    }


def details_to_dict(details: ReservationDetails) -> dict:
    data = reservation_to_dict(details.reservation)
    data.update({
        "room": room_to_dict(details.room),
        "nights": details.nights,
        "bill": money_text(details.bill),
    })
    return data


def outcome_response(outcome: Outcome, what: str):
    if outcome is Outcome.OK:
        return jsonify({"ok": True}), 200
    return jsonify({"error": f"{what}: {outcome.value}"}), STATUS_FOR[outcome]


def whole_number(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} must be a whole number")
    return int(value)


def positive_int(data: dict, key: str) -> int:
    value = whole_number(data, key)
    if value <= 0:
        raise ValueError(f"{key} must be positive")
    return value


def text_field(data: dict, key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise ValueError(f"{key} must be text")
    return value.strip()


# Errors that escape the catalog end the request, never the session
@app.errorhandler(HotelError)
def handle_hotel_error(err):
    app.logger.warning("Request failed: %s", err)
    return jsonify({"error": str(err)}), 400


# --- Choice lists offered to the operator ---

@app.route("/api/categories")
def api_categories():
    return jsonify([{"name": c.display_name, "max_occupancy": c.max_occupancy}
                    for c in RoomCategory])


@app.route("/api/billing-policies")
def api_billing_policies():
    return jsonify([cls.name for cls in BILLING_POLICIES.values()])


# --- Rooms ---

@app.route("/api/rooms", methods=["GET", "POST"])
def api_rooms():
    if request.method == "GET":
        return jsonify([room_to_dict(r) for r in catalog.list_rooms()])

    data = request.json or {}
    try:
        rno = whole_number(data, "room_number")
        rate = to_money(data["rate"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "room_number and rate required"}), 400
    if not rate > 0:
        return jsonify({"error": "rate must be positive"}), 400
    if catalog.has_room(rno):
        return jsonify({"error": "room exists"}), 400

    category = RoomCategory.from_name(data.get("category", "Single"))
    policy = billing_policy_for(data.get("billing_policy", "Regular"))
    room = catalog.add_room(rno, category, rate, policy)
    return jsonify(room_to_dict(room)), 201


@app.route("/api/available")
def api_available():
    return jsonify([room_to_dict(r) for r in catalog.list_available_rooms()])


@app.route("/api/rooms/<int:rno>", methods=["GET", "PATCH", "DELETE"])
def api_room(rno):
    if request.method == "DELETE":
        return outcome_response(catalog.delete_room(rno), f"room {rno}")

    if request.method == "PATCH":
        data = request.json or {}
        if "rate" not in data and "billing_policy" not in data:
            return jsonify({"error": "rate or billing_policy required"}), 400
        # resolve everything before the first write so a bad field changes nothing
        rate = policy = None
        if "rate" in data:
            rate = to_money(data["rate"])
            if not rate > 0:
                return jsonify({"error": "rate must be positive"}), 400
        if "billing_policy" in data:
            policy = billing_policy_for(data["billing_policy"])

        if rate is not None:
            outcome = catalog.update_room_rate(rno, rate)
            if outcome is not Outcome.OK:
                return outcome_response(outcome, f"room {rno}")
        if policy is not None:
            outcome = catalog.update_room_billing_policy(rno, policy)
            if outcome is not Outcome.OK:
                return outcome_response(outcome, f"room {rno}")

    room = catalog.find_room(rno)
    if room is None:
        return jsonify({"error": "not found"}), 404
    return jsonify(room_to_dict(room))


# --- Reservations ---

@app.route("/api/reservations", methods=["GET", "POST"])
def api_reservations():
    if request.method == "GET":
        return jsonify([reservation_to_dict(res) for res in catalog.list_reservations()])

    data = request.json or {}
    try:
        rno = whole_number(data, "room_number")
        guests = positive_int(data, "guests")
        name = text_field(data, "name")
        contact = text_field(data, "contact")
        check_in = text_field(data, "check_in")
        check_out = text_field(data, "check_out")
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "room_number, a positive guests count and text fields required"}), 400

    outcome, reservation = catalog.make_reservation(
        name=name,
        contact=contact,
        room_number=rno,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
    )
    if outcome is not Outcome.OK:
        return outcome_response(outcome, f"room {rno}")
    return jsonify(reservation_to_dict(reservation)), 201


@app.route("/api/reservations/<int:rid>", methods=["GET", "PATCH", "DELETE"])
def api_reservation(rid):
    if request.method == "DELETE":
        return outcome_response(catalog.cancel_reservation(rid), f"reservation {rid}")

    if request.method == "PATCH":
        data = request.json or {}
        try:
            if "guests" in data:
                outcome = catalog.update_reservation_guests(rid, positive_int(data, "guests"))
            elif "room_number" in data:
                outcome = catalog.update_reservation_room(rid, whole_number(data, "room_number"))
            elif "check_in" in data and "check_out" in data:
                outcome = catalog.update_reservation_dates(
                    rid, text_field(data, "check_in"), text_field(data, "check_out"))
            else:
                return jsonify({"error": "guests, room_number or check_in and check_out required"}), 400
        except (TypeError, ValueError):
            return jsonify({"error": "invalid value"}), 400
        if outcome is not Outcome.OK:
            return outcome_response(outcome, f"reservation {rid}")
        return jsonify(reservation_to_dict(catalog.find_reservation(rid)))

    outcome, details = catalog.view_reservation_details(rid)
    if outcome is not Outcome.OK:
        return outcome_response(outcome, f"reservation {rid}")
    return jsonify(details_to_dict(details))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=app.config["DEBUG"])
