import math

from . import log

class ColorCode:
    """An escape sequence that takes no room on the screen."""

    def __init__(self, ccode):
        self.ccode = ccode

    def __str__(self):
        return self.ccode

    def __len__(self):
        return 0

def printlen(l):
    return sum(len(x) for x in l)

def truncate_line(l, width, cs):
    length = 0
    newlist = []
    for element in l:
        newlength = length + len(element)
        if newlength > width:
            newlist.append(element[:width - length])
            newlist.append(ColorCode(cs.RESET))
            break
        newlist.append(element)
        length = newlength
    return newlist

def assemble_line(l):
    return ''.join(str(element) for element in l)

def _number(color, fmt, value):
    return [ColorCode(color), fmt.format(value), ColorCode(log.logger.colors.RESET)]

def _fields(labels, values):
    line = []
    for i, (lbl, val) in enumerate(zip(labels, values)):
        if i > 0:
            line.append('; ')
        line += [lbl, " = ", *val]
    return line

def progress_bar(cs, ratio, width):
    """A percentage followed by a bar filling width characters."""
    ratio = min(max(ratio, 0.0), 1.0)
    percentage = [
            ColorCode(cs.PROGRESS),
            "{0:3d}% ".format(int(ratio * 100)),
            ColorCode(cs.RESET),
            ]
    barlen = width - printlen(percentage) - 2
    if barlen < 1:
        return percentage
    filllen = int(math.ceil(ratio * barlen))
    return percentage + [
            "[",
            ColorCode(cs.PROGRESSBAR),
            "=" * filllen + " " * (barlen - filllen),
            ColorCode(cs.RESET),
            "]",
            ]

def format_statusline_stress(width,
                phase,
                done,
                total,
                size,
                inserted,
                duplicates,
                deleted,
                checks,
                oprate
            ):
    """Two status lines for a running stress test: the progress of the
    current phase and the operation counters."""
    cs = log.logger.colors
    lines = []

    left = [
            ColorCode(cs.DECO), ";;", ColorCode(cs.RESET),
            " ", ColorCode(cs.TREE), phase, ColorCode(cs.RESET), " ",
            ]
    right = [ColorCode(cs.DECO), " ;;", ColorCode(cs.RESET)]
    pad = width - printlen(left) - printlen(right)
    if total > 0 and pad >= 10:
        right = progress_bar(cs, done / float(total), pad) + right
    elif pad > 0:
        right = ['.' * pad] + right
    lines.append(left + right)

    labels = ['size', 'inserted', 'duplicates', 'deleted', 'checks']
    shortlabels = ['n', 'i', 'dup', 'd', 'c']
    values = [
            _number(cs.NUMBERS, "{0:d}", size),
            _number(cs.INSERTS, "{0:d}", inserted),
            _number(cs.NUMBERS, "{0:d}", duplicates),
            _number(cs.DELETES, "{0:d}", deleted),
            _number(cs.NUMBERS, "{0:d}", checks),
            ]
    rate = [' ', 'op/s', ' = ', *_number(cs.gradient(oprate / 1e6),
                                         "{0:.0f}", oprate),
            ColorCode(cs.DECO), ' ;;', ColorCode(cs.RESET)]
    prefix = [ColorCode(cs.DECO), ';; ', ColorCode(cs.RESET)]
    fields = _fields(labels, values)
    pad = width - printlen(prefix) - printlen(fields) - printlen(rate)
    if pad < 0:
        fields = _fields(shortlabels, values)
        pad = width - printlen(prefix) - printlen(fields) - printlen(rate)
    lines.append(prefix + fields + [max(pad, 0) * '.'] + rate)

    return [assemble_line(truncate_line(l, width, cs)) for l in lines]
