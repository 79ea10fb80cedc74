import argparse
import json
import logging

from .orchestrator import hunt


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run one meta scan and print the result envelope as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    envelope, status = hunt()
    print(json.dumps(envelope, indent=2, ensure_ascii=False))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
