#!/usr/bin/env python3
"""Run the vocabtrack API server."""

import logging
import os

import uvicorn


def main():
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get('VOCAB_PORT', '8000'))
    print("Starting vocabtrack API server...")
    print(f"API documentation available at: http://localhost:{port}/docs")
    uvicorn.run(
        "server.app:app",
        host="0.0.0.0",
        port=port,
        reload=True
    )


if __name__ == "__main__":
    main()
