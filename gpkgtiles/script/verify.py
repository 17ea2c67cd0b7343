# This file is part of the gpkgtiles project.
# Copyright (C) 2026 gpkgtiles contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command line verification of GeoPackage tile pyramids.
"""

import logging
import optparse
import sys

from gpkgtiles.config.config import load_config
from gpkgtiles.exception import ConfigurationError, PreconditionError
from gpkgtiles.geopackage import GeoPackage, OPEN
from gpkgtiles.script.util import init_logging
from gpkgtiles.util.sqlite3 import sqlite3
from gpkgtiles.verify import VerificationLevel
from gpkgtiles.verify.verifier import Verifier
from gpkgtiles.version import version

log = logging.getLogger('gpkgtiles.script.verify')


def verify_file(filename, level, config, quiet=False, out=None):
    """
    Verify `filename` and print the issues to `out`.
    Returns the number of errors found.
    """
    if out is None:
        out = sys.stdout
    with GeoPackage(filename, verification_level='none', open_mode=OPEN, config=config) as gpkg:
        verifier = Verifier(gpkg.view, level, tile_formats=tuple(config.image.tile_formats),
                            filename=filename)
        issues = verifier.get_verification_issues()

    errors = 0
    for issue in issues:
        if issue.is_error:
            errors += 1
        elif quiet:
            continue
        print('%s: %s' % (filename, issue), file=out)
    if not quiet:
        for issue in verifier.skipped:
            print('%s: %s' % (filename, issue), file=out)
        print('%s: %d error(s), %d warning(s)' % (filename, errors, len(issues) - errors), file=out)
    return errors


def main(args=None):
    parser = optparse.OptionParser("%prog [options] FILE...",
        version='%prog ' + version)
    parser.add_option("-l", "--level", dest="level", default=None,
        help="Verification level: none, fast or full. Defaults to the configured level.")
    parser.add_option("-f", "--config", dest="config_file", default=None,
        help="Configuration file (YAML).")
    parser.add_option("-q", "--quiet", dest="quiet", action="store_true", default=False,
        help="Only print errors.")

    if args is None:
        args = sys.argv[1:]
    options, args = parser.parse_args(args)

    if not args:
        parser.print_help()
        print("\nERROR: GeoPackage file required.", file=sys.stderr)
        sys.exit(2)

    try:
        config = load_config(options.config_file)
    except ConfigurationError as ex:
        print('ERROR: %s' % ex, file=sys.stderr)
        sys.exit(2)

    init_logging(config.get('log_conf'), logging.ERROR if options.quiet else logging.WARN)

    try:
        level = VerificationLevel.from_string(options.level or config.verification.level)
    except PreconditionError as ex:
        print('ERROR: %s' % ex, file=sys.stderr)
        sys.exit(2)

    status = 0
    for filename in args:
        try:
            errors = verify_file(filename, level, config, quiet=options.quiet)
        except (OSError, sqlite3.DatabaseError) as ex:
            print('ERROR: unable to read %s: %s' % (filename, ex), file=sys.stderr)
            status = 2
            continue
        if errors and status == 0:
            status = 1

    sys.exit(status)


if __name__ == '__main__':
    main()
