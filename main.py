import argparse
import os
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="TOPIK practice server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--data-dir", default="data")
    parser.add_argument(
        "--storage",
        choices=["sqlite", "json", "memory"],
        default=None,
        help="Where the question bank and wrong answers are kept",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    data_dir = Path(args.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    os.environ.setdefault("TOPIK_DATA_DIR", str(data_dir))
    if args.storage:
        os.environ["TOPIK_STORAGE"] = args.storage

    uvicorn.run(
        "topik_practice.app:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
