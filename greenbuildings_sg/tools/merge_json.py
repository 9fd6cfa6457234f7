# tools/merge_json.py — merge a re-geocoded chunk back into the base buildings JSON
import sys

from greenbuildings_sg.merger import merge_files

USAGE = "Usage: greenbuildings-merge-json <basePath> <chunkPath> <outPath>"


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 3 or not all(args[:3]):
        print(USAGE, file=sys.stderr)
        return 1
    base_path, chunk_path, out_path = args[:3]
    try:
        n_base, n_chunk, n_out = merge_files(base_path, chunk_path, out_path)
    except Exception as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    print(f"Merged {n_base} + {n_chunk} => {n_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
