"""
densesvd CLI
============

Decompose a matrix given on the command line, sort the result and print
the pseudo-inverse.

    densesvd 2 4 1 0 0 1 -1 0 2 1
    densesvd 3 4 1 0 0 1 -1 0 2 1 1 2 0 1 -v
    densesvd --input A.csv --output A_pinv.parquet
    densesvd 2 2 1 2 2 4 --config svd.yaml

Values are read row by row: a_11 a_12 ... a_1n a_21 ... a_mn.
Any failure is fatal: message on stderr, exit status 1.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from densesvd.config import SVDConfig, get
from densesvd.decompose import decompose
from densesvd.errors import InvalidInput, SVDError, fatal
from densesvd.inverse import pseudo_inverse
from densesvd.matrix import check_dimensions, diag, format_matrix, from_values
from densesvd.ordering import sort_svd

USAGE = """\
Usage: densesvd <ncolumns> <nrows> <a_11> <a_12> ... <a_mn>
E.g.:
  densesvd 4 3 1 0 0 1 -1 0 2 1 1 2 0 1
  densesvd 3 4 1 0 0 1 -1 0 2 1 1 2 0 1
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='densesvd',
        description='Singular value decomposition and pseudo-inverse of a dense matrix.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  densesvd 4 3 1 0 0 1 -1 0 2 1 1 2 0 1     4 columns, 3 rows
  densesvd 3 4 1 0 0 1 -1 0 2 1 1 2 0 1     3 columns, 4 rows
  densesvd --input A.csv --output pinv.csv  Matrix from / pseudo-inverse to a file
""",
    )
    parser.add_argument('args', nargs='*', metavar='N M A_IJ',
                        help='column count, row count, then m*n entries row by row')
    parser.add_argument('-v', '--verbose', action='count', default=None,
                        help='Diagnostics on stderr (-v phases, -vv progress dots and debug log)')
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML file with verbose / max_iterations / eps overrides')
    parser.add_argument('--input', type=Path, default=None,
                        help='Read A from a headerless .csv or .parquet file')
    parser.add_argument('--output', type=Path, default=None,
                        help='Write the pseudo-inverse to .csv or .parquet')
    return parser


def _usage() -> int:
    sys.stdout.write(USAGE)
    return 0


def _print_matrix(title: str, a: np.ndarray, eps: float):
    print(title)
    for line in format_matrix(a, eps=eps):
        print(line)


def _load(args) -> Optional[np.ndarray]:
    """The matrix from --input or positionals; None means print usage."""
    if args.input is not None:
        from densesvd.matrix_io import read_matrix
        return read_matrix(args.input)

    if len(args.args) < 3:
        return None
    try:
        n = int(args.args[0])
        m = int(args.args[1])
    except ValueError as exc:
        raise InvalidInput(f"expected integer dimensions, got '{args.args[0]}' '{args.args[1]}'") from exc
    check_dimensions(n, m)
    if len(args.args) != n * m + 2:
        return None
    try:
        values = [float(x) for x in args.args[2:]]
    except ValueError as exc:
        raise InvalidInput(f"non-numeric matrix entry: {exc}") from exc
    return from_values(values, n, m)


def run(args) -> int:
    config = SVDConfig.from_yaml(args.config) if args.config is not None else SVDConfig()
    if args.verbose is not None:
        config = config.with_overrides(verbose=args.verbose)
    eps = get('display.eps')

    a = _load(args)
    if a is None:
        return _usage()
    m, n = a.shape

    _print_matrix('A = ', a, eps)

    print('performing SVD:', end='', flush=True)
    u, w, v = decompose(a, config=config)
    print(' done')

    _print_matrix('U =', u, eps)
    _print_matrix('W = ', diag(w, n), eps)
    _print_matrix('V =', v, eps)

    print('performing sorting:', end='', flush=True)
    sort_svd(u, w, v, config=config)
    print(' done')

    _print_matrix('U =', u, eps)
    _print_matrix('W = ', diag(w, n), eps)
    _print_matrix('V =', v, eps)

    at = pseudo_inverse(u, w, v, config=config)
    print(' done')

    _print_matrix('A.T =', at, eps)

    if args.output is not None:
        from densesvd.matrix_io import write_matrix
        write_matrix(args.output, at)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_intermixed_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or 0) > 1 else logging.WARNING,
        format='%(name)s: %(message)s',
    )

    try:
        return run(args)
    except (SVDError, ValueError, OSError) as err:
        fatal(err)


if __name__ == '__main__':
    sys.exit(main())
