"""Start the student records API with Uvicorn.

Host and port are read from environment variables `HOST` and `PORT`.
Defaults are `127.0.0.1` and `8000`.

Usage:
    python run.py
"""
import os

import uvicorn


def main() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("student_records.main:app", host=host, port=port, reload=False,
                log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
