import logging

LOG_MODE_ERROR = -1
LOG_MODE_INFO = 1
LOG_MODE_DEBUG = 2

LOGGER_NAME = "bvh_skeleton"

_LEVELS = {LOG_MODE_ERROR: logging.ERROR,
           LOG_MODE_INFO: logging.INFO,
           LOG_MODE_DEBUG: logging.DEBUG}

_logger = logging.getLogger(LOGGER_NAME)
_logger.addHandler(logging.NullHandler())

_lines = []
_active = True
_mode = LOG_MODE_INFO


def activate():
    global _active
    _active = True


def deactivate():
    global _active
    _active = False


def set_log_mode(mode):
    global _mode
    _mode = mode


def write_log(*args):
    if _active:
        line = " ".join(map(str, args))
        _logger.info(line)
        _lines.append(line)


def write_message_to_log(message, mode=LOG_MODE_INFO):
    if _active and _mode >= mode:
        _logger.log(_LEVELS.get(mode, logging.INFO), message)
        _lines.append(message)


def save_log(filename):
    with open(filename, "w", encoding="utf-8") as outfile:
        for l in _lines:
            outfile.write(l + "\n")


def clear_log():
    del _lines[:]


def get_log_lines():
    return list(_lines)
