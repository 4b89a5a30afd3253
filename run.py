"""Application entry point.

This module serves as the entry point for running the FastAPI application.
The FastAPI app itself lives in board.main.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("board.main:app", host="localhost", port=8000, reload=True)
