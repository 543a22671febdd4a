import argparse
import json
import os
import sys

from payload_masking.config import create_engine
from payload_masking.core.transformer import DataMaskingTransformer, ProblemCollector


def main(argv=None):
    parser = argparse.ArgumentParser(description="JSON payload masking CLI")
    parser.add_argument("--config", default=os.getenv("MASKING_CONFIG_PATH"))
    sub = parser.add_subparsers(dest="cmd")

    j = sub.add_parser("json", help="Mask a JSON document")
    j.add_argument("path", help="Path to JSON file, or '-' for stdin")

    v = sub.add_parser("value", help="Mask a single field value")
    v.add_argument("field", help="Field name used to pick the strategy")
    v.add_argument("value", help="Value to mask")

    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return 0

    engine = create_engine(args.config)

    if args.cmd == "value":
        print(json.dumps(engine.mask_value(args.field, args.value), ensure_ascii=False))
        return 0

    transformer = DataMaskingTransformer(engine)
    context = ProblemCollector()
    if args.path == "-":
        masked = transformer.transform(sys.stdin.buffer, context)
    else:
        with open(args.path, "rb") as f:
            masked = transformer.transform(f, context)

    if masked is None:
        for problem in context.problems:
            print(problem, file=sys.stderr)
        return 1
    print(masked.read().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
