import logging
import sys
import threading

from strava_uploader import create_app
from strava_uploader.errors import ConfigMissing

def log_thread_fault(args):
    # Keep serving when a worker thread dies
    logging.getLogger("strava_uploader").error(
        "Uncaught exception in thread %s", args.thread.name if args.thread else "?",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )

if __name__ == "__main__":
    try:
        app = create_app()
    except ConfigMissing as e:
        print(f"{e}. Please check CLIENT_ID, CLIENT_SECRET, and REFRESH_TOKEN.", file=sys.stderr)
        sys.exit(1)

    threading.excepthook = log_thread_fault
    host, port = app.config["HOST"], app.config["PORT"]
    print("\n" + "="*70)
    print("🚴 Strava Uploader Server")
    print("="*70)
    print(f"🌐 Server: http://localhost:{port}")
    print(f"🔒 Client: http://localhost:{port}/ui")
    print("="*70 + "\n")
    try:
        app.run(host=host, port=port, threaded=True)
    finally:
        # Stop any upload still polling Strava
        app.extensions["upload_shutdown"].set()
