"""
Payments Backend — Uvicorn Launcher
Run this file to start the development server.

Usage:
    python run.py
    python run.py --port 5000
    python run.py --reload
"""
import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Paid Content Payments Backend Server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=5000, help="Bind port (default: 5000)")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload for development")
    parser.add_argument("--workers", type=int, default=1,
                        help="Number of workers (default: 1; the memory ledger is per process)")

    args = parser.parse_args()

    print(f"""
    ========================================================
      Paid Content Payments -- Backend Server
      API:     http://{args.host}:{args.port}/api
      Health:  http://localhost:{args.port}/api/health
      Docs:    http://localhost:{args.port}/docs
    ========================================================
    """)

    uvicorn.run(
        "payledger.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level="info",
    )


if __name__ == "__main__":
    main()
