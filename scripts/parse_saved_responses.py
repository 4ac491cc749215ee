"""
Helper script that re-parses saved raw model answers (.txt) and writes the resulting records as JSON
"""

import argparse
import json
import os
from pathlib import Path

from market_factory.parsing.response_parser import parse_model_response
from market_factory.utils import get_file_list


def parse_folder(input_dir: Path, output_dir: str):
    files_path = [p for p in get_file_list(input_dir, ".txt") if not os.path.isdir(p)]
    os.makedirs(output_dir, exist_ok=True)

    for file_path in files_path:
        print(f"Working with file {file_path} - {os.path.basename(file_path)}")
        with open(file_path, "r", encoding="utf-8") as f:
            raw = f.read()

        details = parse_model_response(raw)
        missing = details.missing_fields()
        if missing:
            print(f"[WARN] {os.path.basename(file_path)}: not found {', '.join(missing)}")

        out_path = os.path.join(output_dir, f"{Path(file_path).stem}.json")
        with open(out_path, "w", encoding="utf-8") as fp:
            json.dump(details.model_dump(by_alias=True), fp, ensure_ascii=False, indent=4)

    print(f"Done: {len(files_path)} files")


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Re-parse saved model answers")
    ap.add_argument("--input-dir", default="custom_outputs/raw_responses")
    ap.add_argument("--output-dir", default="custom_outputs/parsed_responses")
    args = ap.parse_args()
    parse_folder(Path(args.input_dir), args.output_dir)
