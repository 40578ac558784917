# iberiava/routes/pages.py
from __future__ import annotations
import logging
import secrets
from flask import Blueprint, redirect, render_template, request, session, url_for
from pydantic import ValidationError

from ..auth import current_user_id, login_user, logout_user, session_user
from ..catalog import aircraft_types, load_routes
from ..config import get_config
from ..errors import BookingError, NotFound, ValidationFailed
from ..oauth import authorize_url, exchange_code
from ..schemas import BookingRequest
from ..services import book_flight, check_in_flight, list_flights, register_user
from .api import get_store, limiter

log = logging.getLogger(__name__)

pages = Blueprint("pages", __name__)


def _signed_in() -> bool:
    return session_user() is not None


@pages.get("/")
def index():
    if not _signed_in():
        return redirect(url_for("pages.login"))
    return redirect(url_for("pages.dashboard"))


@pages.get("/login")
def login():
    state = secrets.token_urlsafe(16)
    session["oauth_state"] = state
    return redirect(authorize_url(state))


@pages.get("/callback")
@limiter.limit(lambda: get_config().LOGIN_RATE)
def callback():
    code = request.args.get("code")
    if not code:
        return render_template("message.html", message="No code provided"), 400
    expected = session.pop("oauth_state", None)
    if not expected or request.args.get("state") != expected:
        log.warning("oauth state mismatch")
        return render_template("message.html", message="OAuth login failed."), 400
    try:
        identity = exchange_code(code)
        register_user(get_store(), identity)
    except BookingError as e:
        log.error("login failed: %s", e)
        return render_template("message.html", message="OAuth login failed."), e.status
    login_user(identity)
    return redirect(url_for("pages.dashboard"))


@pages.get("/logout")
def logout():
    logout_user()
    return redirect(url_for("pages.login"))


@pages.get("/dashboard")
def dashboard():
    user = session_user()
    if not user:
        return redirect(url_for("pages.login"))
    flights = list_flights(get_store(), str(user["id"]))
    return render_template("dashboard.html", user=user, flights=flights)


def _book_form(error: str | None = None, status: int = 200):
    return render_template(
        "book.html", routes=load_routes(), aircraft=aircraft_types(), error=error
    ), status


@pages.get("/book")
def book_form():
    if not _signed_in():
        return redirect(url_for("pages.login"))
    return _book_form()


@pages.post("/book")
@limiter.limit(lambda: get_config().BOOK_RATE)
def book():
    if not _signed_in():
        return redirect(url_for("pages.login"))
    try:
        payload = BookingRequest.model_validate({
            "from": request.form.get("from", ""),
            "to": request.form.get("to", ""),
            "aircraft": request.form.get("aircraft", ""),
        })
        flight_id = book_flight(get_store(), current_user_id(), payload)
    except ValidationError:
        return _book_form("Invalid booking request", 400)
    except ValidationFailed as e:
        return _book_form(e.message, 400)
    return render_template("message.html", message=f"Flight booked! ID: {flight_id}")


@pages.get("/checkin")
def checkin_form():
    if not _signed_in():
        return redirect(url_for("pages.login"))
    return render_template("checkin.html")


@pages.post("/checkin")
def checkin():
    if not _signed_in():
        return redirect(url_for("pages.login"))
    try:
        check_in_flight(get_store(), current_user_id(), request.form.get("id", ""))
    except NotFound as e:
        return render_template("message.html", message=e.message), 404
    return render_template("message.html", message="Checked in successfully!")
