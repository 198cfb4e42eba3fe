"""
Command-line interface: generate a catalog product as an STL file.
"""

import argparse
import json
import logging
import sys

from .catalog import load_catalog
from .errors import HomegoodsError
from .export import write_stl
from .pipeline import build_product


def parse_assignment(text: str) -> tuple[str, object]:
    """``key=value`` with the value read as JSON when possible (numbers, booleans, lists)."""
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{text}'")
    try:
        return key.strip(), json.loads(value)
    except json.JSONDecodeError:
        return key.strip(), value


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="homegoods-generate",
        description="Generate printable STL files for parametric homegoods",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default vase, written to vase_3d_model.stl
  homegoods-generate vase

  # Twisted lampshade with a closed bottom
  homegoods-generate lampshade --set twist=1 --set hasBottom=true -o shade.stl

  # Bracelet with a wider opening, quick low-resolution preview
  homegoods-generate bracelet --set gapSize=60 --preview

  # List products and their price tiers
  homegoods-generate --list
        """,
    )
    parser.add_argument("product", nargs="?", help="Catalog product id (see --list)")
    parser.add_argument("-o", "--output", help="Output STL path (default: <product>_3d_model.stl)")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        type=parse_assignment,
        default=[],
        metavar="KEY=VALUE",
        help="Override a default parameter (repeatable)",
    )
    parser.add_argument("--preview", action="store_true", help="Halve the mesh resolution")
    parser.add_argument("--catalog", help="Alternative catalog JSON file")
    parser.add_argument("--list", action="store_true", help="List catalog products and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        catalog = load_catalog(args.catalog)
        if args.list:
            for product_id, product in catalog.products.items():
                tiers = ", ".join(f"{size} ${info.price:.2f}" for size, info in product.price_info.sizes().items())
                print(f"{product_id:16} {product.name}" + (f"  ({tiers})" if tiers else ""))
            return 0
        if not args.product:
            parser.error("a product id is required unless --list is given")

        result = build_product(args.product, dict(args.overrides), catalog=catalog, preview=args.preview)
        path = write_stl(result.mesh, args.output or f"{args.product}_3d_model.stl")
    except HomegoodsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Watertight:", result.is_manifold)
    print("Triangles:", result.mesh.triangle_count)
    if result.report.removed:
        print("Removed degenerate triangles:", result.report.removed)
    print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
