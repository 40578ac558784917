# iberiava/cli.py
from __future__ import annotations
import argparse
from .config import config
from .errors import BookingError
from .schemas import Identity
from .services import check_in_flight, register_user
from .store import COLLECTIONS, FLIGHTS, CollectionStore


def _store() -> CollectionStore:
    return CollectionStore(config.DATA_DIR)


def check_store():
    store = _store()
    failed = False
    for name in COLLECTIONS:
        try:
            print(f"{name}: {len(store.read(name))} records ({store.path(name)})")
        except BookingError as e:
            print(f"{name}: {e.code}: {e}")
            failed = True
    if failed:
        raise SystemExit(1)


def add_user(user_id: str, username: str):
    if register_user(_store(), Identity(id=user_id, username=username)):
        print(f"Added user: {user_id} ({username})")
    else:
        print(f"User exists, left unchanged: {user_id}")


def list_flights(user_id: str | None):
    rows = _store().read(FLIGHTS)
    if user_id:
        rows = [f for f in rows if f.user_id == user_id]
    for f in rows:
        print(f"{f.id}\t{f.user_id}\t{f.from_}->{f.to}\t{f.aircraft}\t{f.status}")


def check_in(flight_id: str, user_id: str):
    try:
        f = check_in_flight(_store(), user_id, flight_id)
    except BookingError as e:
        raise SystemExit(f"Check-in failed: {e}")
    print(f"Flight {f.id}: {f.status}")


def serve(host: str, port: int):
    from .app import app
    app.run(host=host, port=port, threaded=True)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="iberiava")
    sub = parser.add_subparsers(dest="cmd", required=True)
    sub.add_parser("check-store", help="Decode every collection and report record counts")
    a = sub.add_parser("add-user", help="Register a user (no-op if the id already exists)")
    a.add_argument("id")
    a.add_argument("username")
    lf = sub.add_parser("list-flights", help="List stored flights")
    lf.add_argument("--user", default=None)
    c = sub.add_parser("check-in", help="Check in a flight on behalf of its owner")
    c.add_argument("flight_id")
    c.add_argument("user_id")
    s = sub.add_parser("serve", help="Run the development server")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=3000)
    args = parser.parse_args(argv)

    if args.cmd == "check-store":
        check_store()
    elif args.cmd == "add-user":
        add_user(args.id, args.username)
    elif args.cmd == "list-flights":
        list_flights(args.user)
    elif args.cmd == "check-in":
        check_in(args.flight_id, args.user_id)
    elif args.cmd == "serve":
        serve(args.host, args.port)


if __name__ == "__main__":
    main()
