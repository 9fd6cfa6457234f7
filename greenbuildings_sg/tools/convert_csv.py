# tools/convert_csv.py — Green Mark CSV → buildings JSON, with cached geocoding
import sys

from greenbuildings_sg.importer import convert_csv, parse_limit, parse_offset, parse_skip

USAGE = "Usage: greenbuildings-convert-csv <csvPath> <outPath> [limit|all] [skipGeocode] [offset]"


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2 or not args[0] or not args[1]:
        print(USAGE, file=sys.stderr)
        return 1
    csv_path, out_path = args[0], args[1]
    limit_arg, skip_arg, offset_arg = (args[2:] + [None, None, None])[:3]
    try:
        convert_csv(
            csv_path,
            out_path,
            limit=parse_limit(limit_arg),
            skip_geocode=parse_skip(skip_arg),
            offset=parse_offset(offset_arg),
        )
    except Exception as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
