import getopt
import sys
import os

import rbtoy
from . import log
from .exception import RBToyError
from .stress import StressRun, KEY_TYPES, ORDERS, DELETE_MODES


def format_report(result, count):
    return ("[{0:s}proper rbtree]\n"
            "total: {1:d} nodes, black height: {2:d} nodes\n"
            "min_depth: {3:d} nodes, max_depth: {4:d} nodes\n").format(
                    "" if result.valid else "un",
                    count,
                    result.black_height,
                    result.min_depth,
                    result.max_depth)

def rbtoy_main(argv):
    log.logger = log.Logger()
    options = parse_arguments(argv)

    if options['seed'] is not None and options['order'] != 'random' and \
            options['delete'] not in ('all', 'mixed'):
        log.warn("seed has no effect with ", options['order'],
                 " keys and delete mode ", options['delete'])

    if options['progress']:
        log.logger = log.ProgressLineLogger.from_logger(log.logger)

    log.info("rbtoy {}: {:d} {} keys, {} order, delete: {}".format(
        rbtoy.__version__, options['keys'], options['key_type'],
        options['order'], options['delete']))

    try:
        run = StressRun(options['keys'],
                        key_type=options['key_type'],
                        order=options['order'],
                        seed=options['seed'],
                        delete=options['delete'],
                        check_every=options['check_every'])
        tree = run.run()
    except RBToyError as e:
        log.fatal(e)

    if options['dump']:
        sys.stdout.write(tree.dump() + "\n")
    sys.stdout.write(format_report(run.result, len(tree)))
    if not run.result.valid:
        log.error(run.violation)
        return 1
    return 0

def default_options():
    opts = {
            'keys' : 1000000,
            'key_type' : 'float',
            'order' : 'random',
            'seed' : None,
            'delete' : 'none',
            'check_every' : 0,
            'dump' : False,
            'progress' : True,
            }
    return opts

def invalid_argument(opt, arg):
    log.fatal_exit(2, "invalid " + opt + " argument `" + str(arg) + "'")

def _nonnegative_int(opt, arg):
    try:
        n = int(arg, 0)
    except ValueError:
        invalid_argument(opt, arg)
    if n < 0:
        invalid_argument(opt, arg)
    return n

def parse_arguments(argv):
    long_opts = [
            'check-every=',
            'color=',
            'delete=',
            'help',
            'keys=',
            'key-type=',
            'order=',
            'print',
            'quiet',
            'seed=',
            'verbose',
            'version',
    ]
    options = default_options()
    opts = 'c:d:hn:o:pqs:t:v'
    try:
        opts, args = getopt.gnu_getopt(argv[1:], opts, long_opts)
    except getopt.GetoptError as err:
        log.fatal_exit(2, err, "\n", "Try `",
                str(os.path.basename(argv[0])),
                " --help' for more information.")

    for opt, arg in opts:
        if opt in ('-h', '--help'):
            usage(os.path.basename(argv[0]))
            sys.exit(0)

        elif opt in ('-n', '--keys'):
            options['keys'] = _nonnegative_int(opt, arg)

        elif opt in ('-t', '--key-type'):
            if arg not in KEY_TYPES:
                invalid_argument(opt, arg)
            options['key_type'] = arg

        elif opt in ('-o', '--order'):
            if arg not in ORDERS:
                invalid_argument(opt, arg)
            options['order'] = arg

        elif opt in ('-s', '--seed'):
            options['seed'] = _nonnegative_int(opt, arg)

        elif opt in ('-d', '--delete'):
            if arg not in DELETE_MODES:
                invalid_argument(opt, arg)
            options['delete'] = arg

        elif opt in ('-c', '--check-every'):
            options['check_every'] = _nonnegative_int(opt, arg)

        elif opt in ('-p', '--print'):
            options['dump'] = True

        elif opt in ('-q', '--quiet'):
            options['progress'] = False

        elif opt in ('-v', '--verbose'):
            log.logger.loglevel += 1

        elif opt in ('--color',):
            try:
                log.logger.set_colors(arg)
            except ValueError:
                invalid_argument(opt, arg)

        elif opt in ('--version',):
            version()
            sys.exit(0)

        else:
            invalid_argument(opt, "")

    if len(args) > 0:
        log.fatal_exit(2, 'unexpected argument `', args[0], "'\n", "Try `",
                str(os.path.basename(argv[0])),
                " --help' for more information.")

    return options

def version():
    sys.stdout.write("rbtoy " + rbtoy.__version__ + "\n")

def usage(program_name):
    def_opts = default_options()
    sys.stdout.write(
            'Usage: {0:s} [option]...'.format(program_name))
    sys.stdout.write(
'''
Fill a red-black tree with keys, optionally delete them again and verify
that the red-black invariants hold.

Options:
      --version              show program's version number and exit
  -h, --help                 show this help message and exit
  -v, --verbose              increase verbosity level (use multiple times for
                               greater effect)
      --color=WHEN           colorize output; WHEN can be 'auto' (default),
                               'always' or 'never'.
  -q, --quiet                do not display progress information

Workload:
  -n, --keys=N               try to insert N keys (default {keys:d})
  -t, --key-type=TYPE        'float' (uniform in [0, 1)) or 'int' (uniform
                               64 bit). Default {key_type:s}
  -o, --order=ORDER          'random', 'ascending' (1..N) or 'descending'
                               (default {order:s})
  -s, --seed=N               seed the random number generator with N
  -d, --delete=MODE          what to delete after/while inserting:
                               'none' (default), 'all' (in random order),
                               'alternate' (every second inserted key) or
                               'mixed' (after each insert, delete the most
                               recently inserted key with probability 1/2)

Checking:
  -c, --check-every=N        check the invariants after every N insertions
                               and deletions. N=0 (default) checks once at
                               the end.
  -p, --print                print every node of the final tree
'''.format(**def_opts))

def main():
    try:
        sys.exit(rbtoy_main(sys.argv))
    except KeyboardInterrupt:
        sys.stderr.write("\nreceived SIGINT, terminating\n")
        sys.exit(3)
