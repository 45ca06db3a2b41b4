"""Print the RIPEMD-160 digest of a file.

usage: ripemd-hash [-l LEVEL] <input-file>
"""
import argparse
import logging
import sys

from byte_buffer import read_file
from ripemd import RIPEMD160
from ripemd_errors import HashError, InvalidUsage, SourceUnavailable

logger = logging.getLogger(__name__)

LOG_LEVEL_CHOICES = {
    # numeric versions
    '10': logging.DEBUG,
    '20': logging.INFO,
    '30': logging.WARNING,
    '40': logging.ERROR,
    '50': logging.CRITICAL,
    # string versions
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARN': logging.WARNING,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

EXIT_FAILURE = 1
EXIT_USAGE = 2


class ValidateLogLevel(argparse.Action):
    def __call__(self, parser, namespace, value, option_string=None):
        try:
            level = LOG_LEVEL_CHOICES[value.upper()]
        except KeyError:
            raise argparse.ArgumentError(
                self,
                f"Invalid logging level '{value}'. LEVEL must be one of: "
                f"{'/'.join(LOG_LEVEL_CHOICES)}"
            )
        setattr(namespace, self.dest, level)


class HashArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises InvalidUsage instead of exiting."""

    def error(self, message):
        raise InvalidUsage(message)


def build_parser():
    parser = HashArgumentParser(
        prog='ripemd-hash',
        description='Compute the RIPEMD-160 digest of a file.',
    )
    parser.add_argument('input_file', help='file to hash')
    parser.add_argument(
        '-l',
        '--log-level',
        action=ValidateLogLevel,
        default=logging.WARNING,
        metavar='LEVEL',
        help='logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL or 10-50)',
    )
    return parser


def hash_file(filename):
    """Return the hex digest of the named file."""
    buffer = read_file(filename)
    return RIPEMD160().ripemd_digest(buffer).hexdigest()


def main(argv=None):
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except InvalidUsage as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=args.log_level,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        digest = hash_file(args.input_file)
    except HashError as e:
        logger.debug("Hashing %s failed", args.input_file, exc_info=True)
        if isinstance(e, SourceUnavailable):
            print(e, file=sys.stderr)
        else:
            print(f"{args.input_file}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(digest)
    return 0


if __name__ == "__main__":
    sys.exit(main())
