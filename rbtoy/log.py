import sys
import os
import fcntl
import array
import termios

import signal
import time
import collections

LOG_FATAL = -2
LOG_ERROR = -1
LOG_WARN = 0
LOG_INFO = 1
LOG_DEBUG1 = 2
LOG_DEBUG2 = 3
LOG_DEBUG3 = 4

# minimum number of seconds between two redraws of the status line
BUFFER_INTERVAL = 0.2

def update():
    logger.update()

def fatal_exit(exitcode, *msg):
    logger.do_log(LOG_FATAL, os.path.basename(sys.argv[0]), ": fatal: ", *msg)
    sys.exit(exitcode)

def fatal(*msg):
    fatal_exit(1, *msg)

def warn(*msg):
    logger.do_log(LOG_WARN, "warning: ", *msg)

def error(*msg):
    logger.do_log(LOG_ERROR, "error: ", *msg)

def info(*msg):
    logger.do_log(LOG_INFO, *msg)

def debug1(*msg):
    logger.do_log(LOG_DEBUG1, *msg)

def debug2(*msg):
    logger.do_log(LOG_DEBUG2, *msg)

def debug3(*msg):
    logger.do_log(LOG_DEBUG3, *msg)


class Logger(object):
    """Writes leveled messages to a file, by default stderr."""

    def __init__(self, loglevel=LOG_WARN, logfile=None, colors='auto'):
        self.loglevel = loglevel
        self._file = logfile if logfile is not None else sys.stderr
        self.set_colors(colors)

    def set_colors(self, preference):
        if preference == 'always':
            colors = Colors()
        elif preference == 'auto':
            colors = Colors() if _isatty(self._file) else NoColors()
        elif preference == 'never':
            colors = NoColors()
        else:
            raise ValueError(preference)
        self.colors = ColorSchemeDefault(colors)
        self._colormap = {
                LOG_FATAL : self.colors.ERROR,
                LOG_ERROR : self.colors.ERROR,
                LOG_WARN  : self.colors.WARN,
                LOG_DEBUG1: self.colors.DEBUG1,
                LOG_DEBUG2: self.colors.DEBUG2,
                LOG_DEBUG3: self.colors.DEBUG3
            }

    def enabled_for(self, level):
        return level <= self.loglevel or level == LOG_FATAL

    def _write_log(self, msg):
        self._file.write(msg)

    def _colorize_msg(self, level, *msg):
        color = self._colormap.get(level)
        if color is None:
            return msg
        return self.colors.wrap_list(color, list(msg))

    def _compile_msg(self, *msg):
        return ''.join(map(str, msg)) + "\n"

    def do_log(self, level, *msg):
        if not self.enabled_for(level):
            return
        msg = self._colorize_msg(level, *msg)
        self._write_log(self._compile_msg(*msg))

    def update(self):
        pass

    def set_status_generator(self, generator, formatfunc):
        pass


def _isatty(f):
    try:
        return f.isatty()
    except (AttributeError, ValueError):
        return False

received_sigwinch = False

def sigwinch_handler(signum, frame):
    global received_sigwinch
    received_sigwinch = True

def setup_signal_handling():
    signal.signal(signal.SIGWINCH, sigwinch_handler)
    signal.siginterrupt(signal.SIGWINCH, False)

def reset_signal_handling():
    signal.signal(signal.SIGWINCH, signal.SIG_DFL)


class ProgressLineLogger(Logger):
    """A Logger that keeps status lines below the log output.

    The status comes from a generator function whose result is passed to a
    format function together with the screen width. Output is buffered and
    flushed at most every BUFFER_INTERVAL seconds, except for warnings and
    errors which are written at once."""

    def __init__(self, loglevel=LOG_WARN, logfile=None, colors='auto'):
        super(ProgressLineLogger, self).__init__(loglevel, logfile, colors)
        self._generator = None
        self._formatter = None
        self._buffer = collections.deque()
        self._flush_interval = 0.0
        self._last_flush = 0
        self._screen_width = 80
        self._current_status = None
        self._statuslines = None
        self._enabled = False

    @staticmethod
    def from_logger(logger):
        plogger = ProgressLineLogger(logger.loglevel, logger._file)
        plogger.colors = logger.colors
        plogger._colormap = logger._colormap
        return plogger

    def enable(self):
        self._last_flush = 0
        self._flush_interval = BUFFER_INTERVAL
        if _isatty(self._file):
            setup_signal_handling()
        self._determine_screen_width()
        self._enabled = True

    def disable(self):
        if not self._enabled:
            return
        self._enabled = False
        self.flush()
        if _isatty(self._file):
            reset_signal_handling()
        self._statuslines = None
        self._flush_interval = 0

    def set_status_generator(self, generator, formatfunc):
        self.flush()
        self._generator, self._formatter = generator, formatfunc
        if generator is not None:
            self.enable()
        else:
            self.disable()

    def flush(self):
        self._format_statuslines()
        self._write_log(''.join(self._buffer))
        self._buffer.clear()
        self._file.flush()
        self._last_flush = time.monotonic()

    def do_log(self, level, *msg):
        if level == LOG_FATAL:
            # drop the status line for good, the program is about to exit
            self._generator = None
            self._current_status = None
            msg = self._colorize_msg(level, *msg)
            self._buffer.append(self._compile_msg(*msg))
            self.flush()
            self.disable()
            return
        if self.enabled_for(level):
            msg = self._colorize_msg(level, *msg)
            self._buffer.append(self._compile_msg(*msg))
            self.update(force=(level <= LOG_WARN))
        elif level <= LOG_DEBUG1:
            self.update()

    def update(self, force=False):
        if self._generator is not None:
            self._current_status = self._generator()
        if not force and \
                time.monotonic() - self._last_flush < self._flush_interval:
            return
        self.flush()

    def _format_statuslines(self):
        if self._current_status is None or self._formatter is None:
            self._current_status = None
            return
        global received_sigwinch
        if received_sigwinch:
            received_sigwinch = False
            self._determine_screen_width()
        if self._statuslines is not None and _isatty(self._file):
            # move up and erase the previously drawn status lines
            self._buffer.appendleft("\r\033[0K" +
                    "\033[A\033[0K" * len(self._statuslines))
        self._statuslines = self._formatter(self._screen_width,
                                            *self._current_status)
        self._current_status = None
        self._buffer.extend(('\n'.join(self._statuslines), "\n"))

    def _determine_screen_width(self):
        if not _isatty(self._file):
            self._screen_width = 80
            return
        buf = array.array('h', [0, 0, 0, 0])
        res = fcntl.ioctl(self._file.fileno(), termios.TIOCGWINSZ, buf)
        if res != 0:
            raise EnvironmentError("ioctl() failed")
        self._screen_width = buf[1]


class NoColors:
    RESET          = ''
    CYAN           = ''
    BRIGHT_RED     = ''
    BRIGHT_GREEN   = ''
    BRIGHT_YELLOW  = ''
    BRIGHT_BLUE    = ''
    BRIGHT_MAGENTA = ''
    BRIGHT_CYAN    = ''

    def wrap(self, color, s):
        return s

    def wrap_list(self, color, l):
        return l

class Colors(NoColors):
    RESET          = '\033[0m'
    CYAN           = '\033[36m'
    BRIGHT_RED     = '\033[1;31m'
    BRIGHT_GREEN   = '\033[1;32m'
    BRIGHT_YELLOW  = '\033[1;33m'
    BRIGHT_BLUE    = '\033[1;34m'
    BRIGHT_MAGENTA = '\033[1;35m'
    BRIGHT_CYAN    = '\033[1;36m'

    def wrap(self, color, s):
        return ''.join((color, s, self.RESET))

    def wrap_list(self, color, l):
        return [color] + l + [self.RESET]

class ColorSchemeDefault:
    def __init__(self, colors=None):
        if colors is None:
            colors = Colors()
        self.WARN = colors.BRIGHT_YELLOW
        self.ERROR = colors.BRIGHT_RED
        self.DEBUG1 = colors.CYAN
        self.DEBUG2 = colors.CYAN
        self.DEBUG3 = colors.CYAN
        self.PROGRESSBAR = colors.CYAN
        self.PROGRESS = colors.BRIGHT_CYAN
        self.INSERTS = colors.BRIGHT_GREEN
        self.DELETES = colors.BRIGHT_RED
        self.NUMBERS = colors.CYAN
        self.TREE = colors.BRIGHT_BLUE
        self.DECO = colors.BRIGHT_MAGENTA

        self.RESET = colors.RESET
        self.colors = colors

    def wrap(self, color, s):
        return self.colors.wrap(color, s)

    def wrap_list(self, color, l):
        return self.colors.wrap_list(color, l)

    def gradient(self, ratio):
        if ratio < 0.33:
            return self.colors.BRIGHT_CYAN
        elif ratio < 0.66:
            return self.colors.BRIGHT_GREEN
        elif ratio < 1.0:
            return self.colors.BRIGHT_YELLOW
        else:
            return self.colors.BRIGHT_RED


logger = Logger()
